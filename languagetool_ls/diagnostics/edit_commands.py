"""Quick-fix commands that replace a diagnostic's range with a suggestion."""

from __future__ import annotations

from typing import Any

from lsprotocol import converters
from lsprotocol import types as lsp

ACCEPT_SUGGESTION_COMMAND = "languageTool.acceptSuggestion"


def build_edit(
    diagnostic: lsp.Diagnostic,
    replacement: str,
    document: lsp.OptionalVersionedTextDocumentIdentifier,
) -> lsp.TextDocumentEdit:
    """Return a single-edit change replacing ``diagnostic``'s range.

    The document version is carried along so the client can reject the edit
    if the document changed since the diagnostic was computed.
    """
    return lsp.TextDocumentEdit(
        text_document=document,
        edits=[lsp.TextEdit(range=diagnostic.range, new_text=replacement)],
    )


def build_edit_command(
    diagnostic: lsp.Diagnostic,
    replacement: str,
    document: lsp.OptionalVersionedTextDocumentIdentifier,
) -> lsp.Command:
    return lsp.Command(
        title=replacement,
        command=ACCEPT_SUGGESTION_COMMAND,
        arguments=[build_edit(diagnostic, replacement, document)],
    )


def diagnostic_replacements(diagnostic: lsp.Diagnostic) -> list[str]:
    """Return the replacements stored on a diagnostic by the mapper."""
    data = diagnostic.data
    if isinstance(data, dict):
        replacements = data.get("replacements") or []
        if isinstance(replacements, list):
            return [str(value) for value in replacements]
    return []


def build_edit_commands(
    diagnostic: lsp.Diagnostic,
    document: lsp.OptionalVersionedTextDocumentIdentifier,
) -> list[lsp.Command]:
    """Return one command per suggested replacement of ``diagnostic``."""
    return [
        build_edit_command(diagnostic, replacement, document)
        for replacement in diagnostic_replacements(diagnostic)
    ]


def parse_edit_argument(argument: Any) -> lsp.TextDocumentEdit:
    """Structure a command argument sent back by the client as JSON."""
    if isinstance(argument, lsp.TextDocumentEdit):
        return argument
    edit = converters.get_converter().structure(argument, lsp.TextDocumentEdit)
    # Sequences may be structured as tuples; keep edits a list like build_edit.
    return lsp.TextDocumentEdit(text_document=edit.text_document, edits=list(edit.edits))
