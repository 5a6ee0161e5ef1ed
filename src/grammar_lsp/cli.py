from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import typer
from lsprotocol.types import Diagnostic

from grammar_lsp.config import CheckerSettings, resolve_settings
from grammar_lsp.coordinator import DiagnosticCoordinator
from grammar_lsp.exceptions import ConfigError
from grammar_lsp.grammar_client import GrammarCheckProvider
from grammar_lsp.logs import setup_logging

app = typer.Typer(add_completion=False)

_STDOUT_ALIAS = "-"
_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _settings_from_options(
    *,
    model: Optional[str],
    api_url: Optional[str],
    timeout: Optional[float],
    config: Optional[Path],
) -> CheckerSettings:
    try:
        return resolve_settings(
            {"model": model, "api_url": api_url, "timeout_seconds": timeout},
            config_path=config,
        )
    except ConfigError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _configure_logging(log_level: str) -> None:
    level = log_level.strip().upper()
    if level not in _LOG_LEVELS:
        raise typer.BadParameter(
            f"--log-level must be one of {', '.join(_LOG_LEVELS)}"
        )
    setup_logging(level)  # type: ignore[arg-type]


def _severity_name(diagnostic: Diagnostic) -> str | None:
    if diagnostic.severity is None:
        return None
    return diagnostic.severity.name.lower()


def _diagnostic_payload(diagnostic: Diagnostic) -> dict[str, object]:
    start = diagnostic.range.start
    end = diagnostic.range.end
    return {
        "range": {
            "start": {"line": start.line, "character": start.character},
            "end": {"line": end.line, "character": end.character},
        },
        "severity": _severity_name(diagnostic),
        "source": diagnostic.source,
        "message": diagnostic.message,
    }


def _write_text_to_target(target: Path, text: str) -> None:
    if str(target) == _STDOUT_ALIAS:
        typer.echo(text)
        return
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text + "\n", encoding="utf-8")


def run_check(
    path: Path,
    settings: CheckerSettings,
    *,
    provider: GrammarCheckProvider | None = None,
) -> dict[str, object]:
    """Check one file the way a save would and return the published payload."""
    published: dict[str, list[Diagnostic]] = {}
    uri = path.resolve().as_uri()
    coordinator = DiagnosticCoordinator(
        provider or GrammarCheckProvider(settings),
        lambda doc_uri, diagnostics: published.__setitem__(doc_uri, diagnostics),
    )
    coordinator.on_open(uri, path.read_text(encoding="utf-8"))
    asyncio.run(coordinator.on_save(uri))
    return {
        "uri": uri,
        "diagnostics": [_diagnostic_payload(diag) for diag in published.get(uri, [])],
    }


@app.command("serve")
def serve(
    model: Optional[str] = typer.Option(None, "--model", help="Ollama model name."),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Ollama generate endpoint."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-check timeout in seconds."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to grammar-lsp.toml."
    ),
    log_level: str = typer.Option("INFO", "--log-level"),
) -> None:
    """Run the language server over stdio."""
    from grammar_lsp import server

    _configure_logging(log_level)
    settings = _settings_from_options(
        model=model, api_url=api_url, timeout=timeout, config=config
    )
    server.start(settings)


@app.command("check")
def check(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    model: Optional[str] = typer.Option(None, "--model", help="Ollama model name."),
    api_url: Optional[str] = typer.Option(
        None, "--api-url", help="Ollama generate endpoint."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-check timeout in seconds."
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Path to grammar-lsp.toml."
    ),
    output: Path = typer.Option(
        Path(_STDOUT_ALIAS), "--output", help="Write JSON to file or '-' for stdout."
    ),
    log_level: str = typer.Option("WARNING", "--log-level"),
) -> None:
    """Check a single file and print the diagnostics a save would publish."""
    _configure_logging(log_level)
    settings = _settings_from_options(
        model=model, api_url=api_url, timeout=timeout, config=config
    )
    result = run_check(path, settings)
    _write_text_to_target(output, json.dumps(result, indent=2, sort_keys=True))
