from __future__ import annotations

import sys
from pathlib import Path

from lsprotocol import converters
from lsprotocol import types as lsp

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from languagetool_ls.diagnostics import (
    ACCEPT_SUGGESTION_COMMAND,
    build_edit,
    build_edit_command,
    build_edit_commands,
    parse_edit_argument,
)

DOCUMENT = lsp.OptionalVersionedTextDocumentIdentifier(uri="file:///tmp/notes.md", version=7)
RANGE = lsp.Range(
    start=lsp.Position(line=1, character=2), end=lsp.Position(line=1, character=7)
)


def _diagnostic(replacements) -> lsp.Diagnostic:
    return lsp.Diagnostic(
        range=RANGE,
        message="Possible spelling mistake found.",
        code="MORFOLOGIK_RULE_EN_US",
        data={"replacements": replacements},
    )


def test_build_edit_replaces_diagnostic_range() -> None:
    edit = build_edit(_diagnostic(["there"]), "there", DOCUMENT)

    assert edit.text_document == DOCUMENT
    assert edit.edits == [lsp.TextEdit(range=RANGE, new_text="there")]


def test_build_edit_command_is_titled_by_replacement() -> None:
    command = build_edit_command(_diagnostic(["there"]), "there", DOCUMENT)

    assert command.title == "there"
    assert command.command == ACCEPT_SUGGESTION_COMMAND == "languageTool.acceptSuggestion"
    assert command.arguments == [build_edit(_diagnostic(["there"]), "there", DOCUMENT)]


def test_one_command_per_replacement_in_order() -> None:
    """Suggestions are offered in LanguageTool's order, whitespace included."""
    commands = build_edit_commands(_diagnostic(["their", "there", " "]), DOCUMENT)

    assert [command.title for command in commands] == ["their", "there", " "]


def test_diagnostic_without_replacements_has_no_commands() -> None:
    assert build_edit_commands(_diagnostic([]), DOCUMENT) == []
    bare = lsp.Diagnostic(range=RANGE, message="No data")
    assert build_edit_commands(bare, DOCUMENT) == []


def test_parse_edit_argument_accepts_json_payload() -> None:
    """Edits sent back by the client as JSON are rebuilt with a list of edits."""
    edit = build_edit(_diagnostic(["there"]), "there", DOCUMENT)
    payload = converters.get_converter().unstructure(edit, lsp.TextDocumentEdit)

    parsed = parse_edit_argument(payload)

    assert parsed.text_document == edit.text_document
    assert isinstance(parsed.edits, list)
    assert parsed == edit
    assert parse_edit_argument(edit) is edit
