from __future__ import annotations

from typing import Callable

from lsprotocol.types import (
    INITIALIZED,
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
    TEXT_DOCUMENT_DID_SAVE,
    Diagnostic,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    DidSaveTextDocumentParams,
    InitializedParams,
    LogMessageParams,
    MessageType,
    PublishDiagnosticsParams,
    SaveOptions,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from grammar_lsp import __version__
from grammar_lsp.config import CheckerSettings
from grammar_lsp.coordinator import DiagnosticCoordinator, IssueChecker, PublishFn
from grammar_lsp.grammar_client import GrammarCheckProvider
from grammar_lsp.logs import get_logger

logger = get_logger(__name__)

SERVER_NAME = "grammar-lsp"

server = LanguageServer(
    SERVER_NAME,
    __version__,
    text_document_sync_kind=TextDocumentSyncKind.Full,
)


def _publish(uri: str, diagnostics: list[Diagnostic]) -> None:
    server.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


_coordinator = DiagnosticCoordinator(GrammarCheckProvider(), _publish)


def configure(
    settings: CheckerSettings | None = None,
    *,
    checker: IssueChecker | None = None,
    publish: PublishFn | None = None,
) -> DiagnosticCoordinator:
    """Swap in a fresh coordinator (and empty document store)."""
    global _coordinator
    _coordinator = DiagnosticCoordinator(
        checker or GrammarCheckProvider(settings),
        publish or _publish,
    )
    return _coordinator


def coordinator() -> DiagnosticCoordinator:
    return _coordinator


@server.feature(INITIALIZED)
def initialized(ls: LanguageServer, params: InitializedParams) -> None:
    ls.window_log_message(
        LogMessageParams(type=MessageType.Info, message="Grammar LSP initialized")
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    doc = params.text_document
    _coordinator.on_open(doc.uri, doc.text)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    # Full sync: each change carries the whole document, the last one wins.
    if not params.content_changes:
        return
    _coordinator.on_change(params.text_document.uri, params.content_changes[-1].text)


@server.feature(TEXT_DOCUMENT_DID_SAVE, SaveOptions(include_text=False))
async def did_save(ls: LanguageServer, params: DidSaveTextDocumentParams) -> None:
    await _coordinator.on_save(params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageServer, params: DidCloseTextDocumentParams) -> None:
    _coordinator.on_close(params.text_document.uri)


def start(
    settings: CheckerSettings | None = None,
    start_fn: Callable[[], None] | None = None,
) -> None:
    """Run the language server on stdio."""
    if settings is not None:
        configure(settings)
    logger.info(f"Starting {SERVER_NAME} {__version__}")
    (start_fn or server.start_io)()


if __name__ == "__main__":  # pragma: no cover
    start()  # pragma: no cover
