"""Choose how a document's raw text becomes analyzable text."""

from __future__ import annotations

import logging

from ..models.annotated_text import AnnotatedText
from ..models.enums import ContentType
from .annotator import annotate
from .markdown_tree import parse_markdown

LOGGER = logging.getLogger(__name__)


def select_text(text: str, content_type: ContentType | str) -> AnnotatedText:
    """Return the annotated text to analyse for ``text``.

    Args:
        text: Raw document text
        content_type: A ContentType or an editor language id

    Raises:
        UnsupportedContentType: if the content type is not recognised.
        AnnotationError: if the parsed Markdown violates the annotator's
            assumptions.
    """
    if not isinstance(content_type, ContentType):
        content_type = ContentType.from_language_id(content_type)

    if content_type is ContentType.MARKDOWN:
        annotated = annotate(parse_markdown(text))
        LOGGER.debug(
            "Annotated %d Markdown characters into %d analyzable characters",
            len(text),
            len(annotated.plain_text),
        )
        return annotated

    # Plain text and TeX are analysed as-is.
    return AnnotatedText.identity(text)
