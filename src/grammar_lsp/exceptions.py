"""Exception types for grammar-lsp."""

from __future__ import annotations


class GrammarLspError(RuntimeError):
    """Root of the package's exception hierarchy."""


class ConfigError(GrammarLspError, ValueError):
    """Raised when resolved settings are unusable (bad timeout, empty model)."""


class InferenceError(GrammarLspError):
    """Transport-level failure while talking to the inference endpoint.

    These never escape the analysis client: the check degrades to an empty
    issue list instead.
    """


class InferenceTimeout(InferenceError):
    """The inference round trip did not finish within the configured timeout."""

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Ollama timeout after {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds
