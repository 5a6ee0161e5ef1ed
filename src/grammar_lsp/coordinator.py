"""Turns editor lifecycle events into published diagnostics."""

from __future__ import annotations

from typing import Callable, Protocol

from lsprotocol.types import Diagnostic

from grammar_lsp.diagnostics import issues_to_diagnostics
from grammar_lsp.documents import DocumentStore
from grammar_lsp.logs import get_logger
from grammar_lsp.schema import GrammarIssue

logger = get_logger(__name__)

PublishFn = Callable[[str, list[Diagnostic]], None]


class IssueChecker(Protocol):
    async def check_text(self, text: str) -> list[GrammarIssue]: ...


class DiagnosticCoordinator:
    """Owns the document store and publishes a full snapshot per save.

    Publication always replaces what the editor shows for a URI. A result
    that arrives after a newer edit is still published; the next save
    corrects it.
    """

    def __init__(
        self,
        checker: IssueChecker,
        publish: PublishFn,
        *,
        store: DocumentStore | None = None,
    ) -> None:
        self.checker = checker
        self.publish = publish
        self.store = store if store is not None else DocumentStore()

    def on_open(self, uri: str, text: str) -> None:
        self.store.put(uri, text)

    def on_change(self, uri: str, text: str) -> None:
        self.store.put(uri, text)

    async def on_save(self, uri: str) -> None:
        text = self.store.get(uri)
        if text is None:
            logger.debug(f"Save for unknown document {uri}; skipping")
            return
        diagnostics = await self.diagnostics_for_text(text)
        self.publish(uri, diagnostics)

    def on_close(self, uri: str) -> None:
        self.store.remove(uri)
        self.publish(uri, [])

    async def diagnostics_for_text(self, text: str) -> list[Diagnostic]:
        issues = await self.checker.check_text(text)
        return issues_to_diagnostics(issues)
