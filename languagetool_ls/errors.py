"""Exceptions shared by the annotation, mapping and checking layers."""

from __future__ import annotations


class LanguageServerError(Exception):
    """Base class for errors raised by the language server core."""


class UnsupportedContentType(LanguageServerError, ValueError):
    """Raised when a document's declared content type cannot be analysed."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Language, {content_type}, is not supported.")
        self.content_type = content_type


class AnnotationError(LanguageServerError, ValueError):
    """Raised when a parsed document tree violates the annotator's assumptions."""


class UnsupportedNesting(AnnotationError):
    """Raised when a prose container is found inside another prose container."""


class OutOfRange(LanguageServerError, IndexError):
    """Raised when an offset falls outside the text it refers to."""

    def __init__(self, offset: int, length: int, *, what: str = "text") -> None:
        super().__init__(f"Offset {offset} is outside the {what} (length {length})")
        self.offset = offset
        self.length = length
