from __future__ import annotations

import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))


import loguru
import pytest

from grammar_lsp.schema import GrammarIssue


@pytest.fixture
def log_messages():
    messages: list[str] = []
    handler_id = loguru.logger.add(
        lambda message: messages.append(message.record["message"]),
        level="DEBUG",
    )
    yield messages
    loguru.logger.remove(handler_id)


class RecordingPublisher:
    def __init__(self) -> None:
        self.calls: list[tuple[str, list]] = []

    def __call__(self, uri: str, diagnostics: list) -> None:
        self.calls.append((uri, list(diagnostics)))


class StaticChecker:
    def __init__(self, issues: list[GrammarIssue] | None = None) -> None:
        self.issues = list(issues or [])
        self.texts: list[str] = []

    async def check_text(self, text: str) -> list[GrammarIssue]:
        self.texts.append(text)
        return list(self.issues)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def make_checker():
    def _make(issues: list[GrammarIssue] | None = None) -> StaticChecker:
        return StaticChecker(issues)

    return _make
