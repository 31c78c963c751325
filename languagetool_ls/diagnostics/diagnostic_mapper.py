"""Translate LanguageTool issues into editor diagnostics.

Issue offsets point into the analyzable text; they are mapped through the
annotated text to source offsets, then through the position calculator to
line/column positions in the original document.
"""

from __future__ import annotations

import logging
from typing import Iterable

from lsprotocol import types as lsp

from ..errors import OutOfRange
from ..models.annotated_text import AnnotatedText
from ..models.issue import Issue
from ..utils.position_utils import DocumentPositionCalculator

LOGGER = logging.getLogger(__name__)

ANALYZER_NAME = "LanguageTool"


def format_message(issue: Issue) -> str:
    if issue.replacements:
        return f"{issue.message}\nSuggested Replacements: {', '.join(issue.replacements)}"
    return issue.message


def to_diagnostic(
    issue: Issue,
    annotated: AnnotatedText,
    calculator: DocumentPositionCalculator,
) -> lsp.Diagnostic:
    """Return the diagnostic for ``issue`` in original-document coordinates.

    Raises:
        OutOfRange: if the issue's offsets fall outside the analyzable text.
    """
    start = annotated.original_offset(issue.start)
    end = annotated.original_offset(issue.end, is_end=True)
    # An empty issue just after markup maps its end before its start.
    end = max(start, end)

    return lsp.Diagnostic(
        range=calculator.range_of(start, end),
        message=format_message(issue),
        severity=lsp.DiagnosticSeverity.Warning,
        code=issue.rule_id,
        source=f"{ANALYZER_NAME}: {issue.rule_description}",
        data={"replacements": list(issue.replacements)},
    )


def build_diagnostics(
    issues: Iterable[Issue],
    annotated: AnnotatedText,
    calculator: DocumentPositionCalculator,
) -> list[lsp.Diagnostic]:
    """Map every issue, dropping the ones whose offsets are out of range."""
    diagnostics: list[lsp.Diagnostic] = []
    for issue in issues:
        try:
            diagnostics.append(to_diagnostic(issue, annotated, calculator))
        except OutOfRange as exc:
            LOGGER.warning("Dropping issue %s: %s", issue.rule_id, exc)
    return diagnostics
