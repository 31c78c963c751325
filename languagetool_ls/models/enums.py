"""Enumerations shared by the annotation and checking layers."""

from __future__ import annotations

from enum import Enum

from ..errors import UnsupportedContentType


class ContentType(str, Enum):
    """Content families the server knows how to reduce to analyzable text.

    Values match the editor language identifiers sent in ``didOpen``.
    """

    PLAINTEXT = "plaintext"
    MARKDOWN = "markdown"
    TEX = "tex"

    @classmethod
    def all_values(cls) -> list[str]:
        return [m.value for m in cls]

    @classmethod
    def from_language_id(cls, language_id: str) -> "ContentType":
        """Resolve an editor language id to its content family.

        Raises:
            UnsupportedContentType: if the id belongs to no known family.
        """
        normalised = str(language_id or "").strip().lower()
        content_type = _LANGUAGE_ID_FAMILIES.get(normalised)
        if content_type is None:
            raise UnsupportedContentType(language_id)
        return content_type


_LANGUAGE_ID_FAMILIES: dict[str, ContentType] = {
    "plaintext": ContentType.PLAINTEXT,
    "text": ContentType.PLAINTEXT,
    "markdown": ContentType.MARKDOWN,
    "tex": ContentType.TEX,
    "latex": ContentType.TEX,
    "plaintex": ContentType.TEX,
}


class SegmentKind(str, Enum):
    """Classification of a run of source characters."""

    TEXT = "text"
    MARKUP = "markup"


class NodeKind(str, Enum):
    """Node kinds recognised in a parsed structured document.

    Only ``DOCUMENT``, ``PARAGRAPH`` and ``TEXT`` change how the annotator
    behaves; every other kind has its children visited.
    """

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    HEADING = "heading"
    BLOCK_QUOTE = "block_quote"
    LIST = "list"
    LIST_ITEM = "list_item"
    LINK = "link"
    IMAGE = "image"
    EMPHASIS = "emphasis"
    STRONG = "strong"
    CODE = "code"
    CODE_BLOCK = "code_block"
    HTML = "html"
    THEMATIC_BREAK = "thematic_break"
    OTHER = "other"
