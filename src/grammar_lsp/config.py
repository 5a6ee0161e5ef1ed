from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Mapping, TypeAlias
import os
import tomllib

from grammar_lsp.exceptions import ConfigError

DEFAULT_CONFIG_NAME = "grammar-lsp.toml"
DEFAULT_MODEL = "gemma3:4b"
DEFAULT_API_URL = "http://localhost:11434/api/generate"
DEFAULT_TIMEOUT_SECONDS = 60.0

ENV_MODEL = "GRAMMAR_LSP_MODEL"
ENV_API_URL = "GRAMMAR_LSP_API_URL"
ENV_TIMEOUT_SECONDS = "GRAMMAR_LSP_TIMEOUT_SECONDS"

TomlScalar: TypeAlias = str | int | float | bool | None | date | datetime | time
TomlValue: TypeAlias = TomlScalar | list["TomlValue"] | dict[str, "TomlValue"]
TomlTable: TypeAlias = dict[str, TomlValue]


@dataclass(frozen=True)
class CheckerSettings:
    model: str = DEFAULT_MODEL
    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self) -> None:
        model = str(self.model).strip()
        api_url = str(self.api_url).strip()
        if not model:
            raise ConfigError("model must not be empty")
        if not api_url:
            raise ConfigError("api_url must not be empty")
        object.__setattr__(self, "model", model)
        object.__setattr__(self, "api_url", api_url)
        object.__setattr__(self, "timeout_seconds", _as_timeout(self.timeout_seconds))


def _as_timeout(value: object) -> float:
    if isinstance(value, bool):
        raise ConfigError(f"timeout_seconds must be a number, got {value!r}")
    try:
        seconds = Decimal(str(value).strip())
    except InvalidOperation:
        raise ConfigError(f"timeout_seconds must be a number, got {value!r}") from None
    if not seconds.is_finite() or seconds <= 0:
        raise ConfigError(f"timeout_seconds must be positive, got {value!r}")
    return float(seconds)


def _load_toml(path: Path) -> TomlTable:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError:
        return {}
    try:
        data = tomllib.loads(raw)
    except tomllib.TOMLDecodeError:
        return {}
    return data if isinstance(data, dict) else {}


def load_config(root: Path | None = None, config_path: Path | None = None) -> TomlTable:
    if config_path is None:
        base = root if root is not None else Path.cwd()
        config_path = base / DEFAULT_CONFIG_NAME
    return _load_toml(config_path)


def ollama_defaults(
    root: Path | None = None, config_path: Path | None = None
) -> TomlTable:
    data = load_config(root=root, config_path=config_path)
    section = data.get("ollama", {})
    return section if isinstance(section, dict) else {}


def env_defaults(environ: Mapping[str, str] | None = None) -> TomlTable:
    env = os.environ if environ is None else environ
    values: TomlTable = {}
    for key, name in (
        ("model", ENV_MODEL),
        ("api_url", ENV_API_URL),
        ("timeout_seconds", ENV_TIMEOUT_SECONDS),
    ):
        text = env.get(name, "").strip()
        if text:
            values[key] = text
    return values


def merge_payload(payload: TomlTable, defaults: TomlTable) -> TomlTable:
    merged = dict(defaults)
    for key, value in payload.items():
        if value is None:
            continue
        merged[key] = value
    return merged


def resolve_settings(
    overrides: TomlTable | None = None,
    *,
    root: Path | None = None,
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> CheckerSettings:
    """Merge file, environment and explicit overrides, in that order."""
    merged = merge_payload(env_defaults(environ), ollama_defaults(root, config_path))
    merged = merge_payload(overrides or {}, merged)
    return CheckerSettings(
        model=str(merged.get("model", DEFAULT_MODEL)),
        api_url=str(merged.get("api_url", DEFAULT_API_URL)),
        timeout_seconds=merged.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS),
    )
