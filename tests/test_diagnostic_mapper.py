from __future__ import annotations

import sys
from pathlib import Path

from lsprotocol import types as lsp

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from languagetool_ls.diagnostics import build_diagnostics, to_diagnostic
from languagetool_ls.diagnostics.diagnostic_mapper import format_message
from languagetool_ls.markup import select_text
from languagetool_ls.models import AnnotatedText, Issue
from languagetool_ls.utils.position_utils import DocumentPositionCalculator


def _issue(**overrides) -> Issue:
    data = {
        "start": 0,
        "end": 5,
        "message": "Possible spelling mistake found.",
        "replacements": ["This", "Thus"],
        "rule_id": "MORFOLOGIK_RULE_EN_GB",
        "rule_description": "Possible Typo",
        "issue_type": "misspelling",
    }
    data.update(overrides)
    return Issue(**data)


def test_message_lists_replacements() -> None:
    assert format_message(_issue()) == (
        "Possible spelling mistake found.\nSuggested Replacements: This, Thus"
    )
    assert format_message(_issue(replacements=[])) == "Possible spelling mistake found."


def test_identity_diagnostic_fields() -> None:
    text = "Thiss is a test."
    annotated = AnnotatedText.identity(text)

    diagnostic = to_diagnostic(_issue(), annotated, DocumentPositionCalculator(text))

    assert diagnostic.range == lsp.Range(
        start=lsp.Position(line=0, character=0), end=lsp.Position(line=0, character=5)
    )
    assert diagnostic.severity == lsp.DiagnosticSeverity.Warning
    assert diagnostic.source == "LanguageTool: Possible Typo"
    assert diagnostic.code == "MORFOLOGIK_RULE_EN_GB"
    assert diagnostic.data == {"replacements": ["This", "Thus"]}


def test_rule_description_falls_back_to_rule_id() -> None:
    issue = _issue(rule_description="")
    text = "Thiss is a test."

    diagnostic = to_diagnostic(issue, AnnotatedText.identity(text), DocumentPositionCalculator(text))

    assert diagnostic.source == "LanguageTool: MORFOLOGIK_RULE_EN_GB"


def test_markdown_issue_maps_past_markup() -> None:
    """Findings in Markdown land on the visible link text, not its syntax."""
    source = "# Heading\nParagraph with\nmultiple lines and [lnk](example.com)"
    annotated = select_text(source, "markdown")
    start = annotated.plain_text.index("lnk")
    issue = _issue(start=start, end=start + 3, replacements=["link"])

    diagnostic = to_diagnostic(issue, annotated, DocumentPositionCalculator(source))

    assert diagnostic.range == lsp.Range(
        start=lsp.Position(line=2, character=20), end=lsp.Position(line=2, character=23)
    )


def test_issue_spanning_folded_line_break() -> None:
    """An issue across a folded line break spans both source lines."""
    source = "Paragraph with\nmultiple lines"
    annotated = select_text(source, "markdown")
    issue = _issue(start=10, end=23)  # "with multiple"

    diagnostic = to_diagnostic(issue, annotated, DocumentPositionCalculator(source))

    assert diagnostic.range.start == lsp.Position(line=0, character=10)
    assert diagnostic.range.end == lsp.Position(line=1, character=8)


def test_mapping_is_deterministic() -> None:
    source = "Some *emphasis* here."
    annotated = select_text(source, "markdown")
    calculator = DocumentPositionCalculator(source)

    first = to_diagnostic(_issue(start=5, end=13), annotated, calculator)
    second = to_diagnostic(_issue(start=5, end=13), annotated, calculator)

    assert first == second


def test_out_of_range_issues_are_dropped() -> None:
    """Issues pointing past the analysed text are dropped, not clamped."""
    text = "Short."
    annotated = AnnotatedText.identity(text)
    issues = [_issue(start=0, end=5), _issue(start=3, end=50)]

    diagnostics = build_diagnostics(issues, annotated, DocumentPositionCalculator(text))

    assert len(diagnostics) == 1
    assert diagnostics[0].range.end == lsp.Position(line=0, character=5)
