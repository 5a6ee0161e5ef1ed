from __future__ import annotations

import json
from pathlib import Path

from typer.testing import CliRunner

from grammar_lsp.cli import app, run_check
from grammar_lsp.config import CheckerSettings
from grammar_lsp.grammar_client import GrammarCheckProvider

runner = CliRunner()


class _Reply:
    def __init__(self, text: str) -> None:
        self._text = text

    def raise_for_status(self) -> None:
        return None

    def json(self) -> dict:
        return {"response": self._text}


def test_run_check_reports_save_diagnostics(tmp_path: Path) -> None:
    sample = tmp_path / "notes.txt"
    sample.write_text("Teh cat sat.\n", encoding="utf-8")
    reply = json.dumps(
        {"issues": [{"line": 1, "column": 0, "message": "Spelling: 'Teh' should be 'The'"}]}
    )
    provider = GrammarCheckProvider(post=lambda url, **kwargs: _Reply(reply))

    result = run_check(sample, CheckerSettings(), provider=provider)

    assert result == {
        "uri": sample.resolve().as_uri(),
        "diagnostics": [
            {
                "range": {
                    "start": {"line": 0, "character": 0},
                    "end": {"line": 0, "character": 1},
                },
                "severity": "warning",
                "source": "grammar-checker",
                "message": "Spelling: 'Teh' should be 'The'",
            }
        ],
    }


def test_check_rejects_bad_timeout(tmp_path: Path) -> None:
    sample = tmp_path / "notes.txt"
    sample.write_text("text", encoding="utf-8")
    result = runner.invoke(app, ["check", str(sample), "--timeout", "0"])
    assert result.exit_code == 2
    assert "timeout_seconds" in result.output


def test_check_rejects_unknown_log_level(tmp_path: Path) -> None:
    sample = tmp_path / "notes.txt"
    sample.write_text("text", encoding="utf-8")
    result = runner.invoke(app, ["check", str(sample), "--log-level", "loud"])
    assert result.exit_code == 2


def test_check_with_unreachable_backend_writes_empty_result(tmp_path: Path) -> None:
    sample = tmp_path / "notes.txt"
    sample.write_text("Teh cat sat.", encoding="utf-8")
    output = tmp_path / "out" / "diagnostics.json"
    config = tmp_path / "grammar-lsp.toml"
    config.write_text(
        '[ollama]\napi_url = "http://127.0.0.1:9/api/generate"\ntimeout_seconds = 5\n',
        encoding="utf-8",
    )

    result = runner.invoke(
        app,
        ["check", str(sample), "--config", str(config), "--output", str(output)],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload == {"uri": sample.resolve().as_uri(), "diagnostics": []}
