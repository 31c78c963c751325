"""Immutable document snapshot handed to the checking layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lsprotocol import types as lsp

# URI schemes that are checked. Other schemes (e.g. VS Code's ``git:`` or
# ``output:`` views) mirror documents that are already checked elsewhere.
SUPPORTED_URI_SCHEMES = ("file:", "untitled:")


@dataclass(frozen=True)
class SourceDocument:
    """Snapshot of an open editor document.

    Attributes:
        uri: Document URI as sent by the client
        version: Client version counter (``None`` for unversioned documents)
        text: Full raw document text
        language_id: Declared editor language id (e.g. "markdown")
    """

    uri: str
    version: int | None
    text: str
    language_id: str

    @classmethod
    def from_text_document(cls, document: Any) -> "SourceDocument":
        """Snapshot a pygls ``TextDocument`` (or anything shaped like one)."""
        return cls(
            uri=document.uri,
            version=getattr(document, "version", None),
            text=document.source,
            language_id=getattr(document, "language_id", None) or "plaintext",
        )

    @property
    def has_supported_scheme(self) -> bool:
        return self.uri.startswith(SUPPORTED_URI_SCHEMES)

    def identifier(self) -> lsp.OptionalVersionedTextDocumentIdentifier:
        """Return the versioned identifier used to tag edits for this snapshot."""
        return lsp.OptionalVersionedTextDocumentIdentifier(
            uri=self.uri, version=self.version
        )
