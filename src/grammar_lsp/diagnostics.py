from __future__ import annotations

from typing import Iterable

from lsprotocol.types import Diagnostic, DiagnosticSeverity, Position, Range

from grammar_lsp.schema import GrammarIssue

DIAGNOSTIC_SOURCE = "grammar-checker"


def issue_range(issue: GrammarIssue) -> Range:
    """One-character range at the issue's start, in 0-based LSP coordinates.

    The model counts lines from 1; lines of 0 or below land on line 0.
    """
    line = max(issue.line - 1, 0)
    return Range(
        start=Position(line=line, character=issue.column),
        end=Position(line=line, character=issue.column + 1),
    )


def issue_to_diagnostic(issue: GrammarIssue) -> Diagnostic:
    return Diagnostic(
        range=issue_range(issue),
        severity=DiagnosticSeverity.Warning,
        source=DIAGNOSTIC_SOURCE,
        message=issue.message,
    )


def issues_to_diagnostics(issues: Iterable[GrammarIssue]) -> list[Diagnostic]:
    return [issue_to_diagnostic(issue) for issue in issues]
