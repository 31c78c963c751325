"""Language Server Protocol front end for LanguageTool.

The handlers here are glue: they snapshot documents from the pygls
workspace, hand them to :mod:`languagetool_ls.language_check`, and relay the
resulting diagnostics and quick-fix edits to the client.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from language_tool_python.utils import LanguageToolError
from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..diagnostics.edit_commands import (
    ACCEPT_SUGGESTION_COMMAND,
    build_edit_commands,
    parse_edit_argument,
)
from ..diagnostics.range_utils import filter_overlapping
from ..language_check.language_check import diagnose_document
from ..language_check.language_check_config import DEFAULT_DISABLED_RULES
from ..language_check.language_tool_manager import LanguageToolManager
from ..models.document import SourceDocument
from ..utils.position_utils import DEFAULT_POSITION_ENCODING
from .settings import WorkspaceSettings, parse_workspace_settings

LOGGER = logging.getLogger(__name__)

SERVER_NAME = "languagetool-ls"


class LanguageToolServer(LanguageServer):
    """Language server owning the selected language and its LanguageTool instance."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.settings = WorkspaceSettings()
        self.remote_server: str | None = None
        self.manager: LanguageToolManager | None = None
        self.tool: Any | None = None

    def configure(self, settings: WorkspaceSettings) -> None:
        """Apply new workspace settings and rebuild the LanguageTool instance.

        An unsupported language disables checking until the next change.
        """
        self.close_tool()
        self.settings = settings
        if settings.language is None:
            LOGGER.info("No language configured; checking disabled")
            return

        self.manager = LanguageToolManager(
            ignored_words=settings.ignored_words,
            disabled_rules=DEFAULT_DISABLED_RULES | set(settings.disabled_rules),
            remote_server=self.remote_server,
            logger=LOGGER,
        )
        try:
            self.tool = self.manager.build_tool(settings.language)
        except ValueError:
            LOGGER.error(
                "%s is not a recognized language. Checking disabled.", settings.language
            )
            self.tool = None
        except (LanguageToolError, OSError):
            LOGGER.exception(
                "Could not start LanguageTool for %s. Checking disabled.", settings.language
            )
            self.tool = None

    def close_tool(self) -> None:
        if self.tool is not None and hasattr(self.tool, "close"):
            self.tool.close()
        self.tool = None

    def snapshot(self, uri: str) -> SourceDocument:
        return SourceDocument.from_text_document(self.workspace.get_text_document(uri))

    def position_encoding(self) -> str:
        """Position encoding negotiated with the client during initialize."""
        return self.workspace.position_encoding or DEFAULT_POSITION_ENCODING

    def open_uris(self) -> list[str]:
        return list(self.workspace.text_documents)

    def diagnostics_for(self, document: SourceDocument) -> list[lsp.Diagnostic]:
        if self.tool is None:
            return []
        return diagnose_document(
            document,
            self.tool,
            ignored_words=self.settings.ignored_words,
            position_encoding=self.position_encoding(),
        )

    def publish_issues(self, uri: str) -> None:
        document = self.snapshot(uri)
        self.publish(uri, self.diagnostics_for(document))

    def publish(self, uri: str, diagnostics: list[lsp.Diagnostic]) -> None:
        self.text_document_publish_diagnostics(
            lsp.PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
        )

    def publish_all(self) -> None:
        for uri in self.open_uris():
            self.publish_issues(uri)


def code_actions_for(
    document: SourceDocument, params: lsp.CodeActionParams
) -> list[lsp.Command]:
    """Return accept-suggestion commands for diagnostics under the request range.

    Replacements come from the diagnostics the client sends back in the
    request context, so no new LanguageTool check is needed.
    """
    if not params.context.diagnostics:
        return []
    identifier = document.identifier()
    commands: list[lsp.Command] = []
    for diagnostic in filter_overlapping(params.range, params.context.diagnostics):
        commands.extend(build_edit_commands(diagnostic, identifier))
    return commands


def collect_edits(arguments: Iterable[Any]) -> list[lsp.TextDocumentEdit]:
    """Structure the edits carried by an accept-suggestion command.

    Arguments may arrive unpacked or as a single list, depending on how the
    command was dispatched.
    """
    edits: list[lsp.TextDocumentEdit] = []
    for argument in arguments:
        if isinstance(argument, (list, tuple)):
            edits.extend(collect_edits(argument))
        else:
            edits.append(parse_edit_argument(argument))
    return edits


server = LanguageToolServer(SERVER_NAME, __version__)


@server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageToolServer, params: lsp.DidOpenTextDocumentParams) -> None:
    ls.publish_issues(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageToolServer, params: lsp.DidChangeTextDocumentParams) -> None:
    ls.publish_issues(params.text_document.uri)


@server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
def did_close(ls: LanguageToolServer, params: lsp.DidCloseTextDocumentParams) -> None:
    ls.publish(params.text_document.uri, [])


@server.feature(
    lsp.TEXT_DOCUMENT_CODE_ACTION,
    lsp.CodeActionOptions(code_action_kinds=[lsp.CodeActionKind.QuickFix]),
)
def code_action(ls: LanguageToolServer, params: lsp.CodeActionParams) -> list[lsp.Command]:
    document = ls.snapshot(params.text_document.uri)
    return code_actions_for(document, params)


@server.feature(lsp.WORKSPACE_DID_CHANGE_CONFIGURATION)
def did_change_configuration(
    ls: LanguageToolServer, params: lsp.DidChangeConfigurationParams
) -> None:
    settings = parse_workspace_settings(params.settings)
    if settings is None:
        return
    ls.configure(settings)
    ls.publish_all()


@server.command(ACCEPT_SUGGESTION_COMMAND)
async def accept_suggestion(ls: LanguageToolServer, *arguments: Any) -> bool:
    edits = collect_edits(arguments)
    if not edits:
        return False
    result = await ls.workspace_apply_edit_async(
        lsp.ApplyWorkspaceEditParams(
            edit=lsp.WorkspaceEdit(document_changes=edits),
            label="Apply LanguageTool suggestion",
        )
    )
    if not result.applied:
        LOGGER.info("Client rejected suggestion: %s", result.failure_reason)
    return result.applied


@server.feature(lsp.SHUTDOWN)
def shutdown(ls: LanguageToolServer, params: Any) -> None:
    ls.close_tool()
