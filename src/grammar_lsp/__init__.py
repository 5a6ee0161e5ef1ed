"""grammar-lsp package root."""

from grammar_lsp.exceptions import (
    ConfigError,
    GrammarLspError,
    InferenceError,
    InferenceTimeout,
)

__all__ = [
    "__version__",
    "ConfigError",
    "GrammarLspError",
    "InferenceError",
    "InferenceTimeout",
]

__version__ = "0.1.0"
