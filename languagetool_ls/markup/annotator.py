"""Build the analyzable text for a parsed structured document.

The walk classifies every source character exactly once:

- TEXT leaves contribute their literal content.
- Characters between nodes (the "gap") are markup, except line breaks:
  inside a paragraph they fold to a single space so a wrapped paragraph
  reads as one sentence; outside one they are kept so block boundaries stay
  visible to the grammar checker.
- A paragraph inside a paragraph is rejected.

The cursor (how far the source has been consumed) is passed into and
returned from every visit, so concurrent annotations share nothing.
"""

from __future__ import annotations

from ..errors import AnnotationError, UnsupportedNesting
from ..models.annotated_text import AnnotatedText, AnnotatedTextBuilder
from ..models.enums import NodeKind
from ..utils.position_utils import LINE_BREAK_PATTERN
from .markdown_tree import Node, ParsedDocument


def annotate(parsed: ParsedDocument) -> AnnotatedText:
    """Return the annotated text for ``parsed``.

    Raises:
        UnsupportedNesting: if a paragraph is nested inside another paragraph.
        AnnotationError: if a text leaf overlaps content already consumed.
    """
    source = parsed.source
    builder = AnnotatedTextBuilder()
    cursor = _visit(parsed.root, source, builder, 0, in_prose=False)
    _walk_gap(source, cursor, len(source), builder, in_prose=False)
    return builder.build(len(source))


def _visit(
    node: Node,
    source: str,
    builder: AnnotatedTextBuilder,
    cursor: int,
    *,
    in_prose: bool,
) -> int:
    if node.kind is NodeKind.PARAGRAPH:
        if in_prose:
            raise UnsupportedNesting("Nested paragraphs are not supported")
        cursor = _walk_gap(source, cursor, node.start, builder, in_prose=False)
        for child in node.children:
            cursor = _visit(child, source, builder, cursor, in_prose=True)
        # Trailing inline syntax, e.g. the "](url)" of a closing link.
        return _walk_gap(source, cursor, node.end, builder, in_prose=True)

    if node.kind is NodeKind.TEXT:
        if node.start < cursor:
            raise AnnotationError(
                f"Text node at [{node.start}, {node.end}) overlaps consumed source up to {cursor}"
            )
        cursor = _walk_gap(source, cursor, node.start, builder, in_prose=in_prose)
        builder.add_text(node.start, node.end, node.text)
        return node.end

    # Unrecognised kinds contribute nothing themselves.
    for child in node.children:
        cursor = _visit(child, source, builder, cursor, in_prose=in_prose)
    return cursor


def _walk_gap(
    source: str,
    cursor: int,
    stop: int,
    builder: AnnotatedTextBuilder,
    *,
    in_prose: bool,
) -> int:
    """Classify ``source[cursor:stop]`` and return the new cursor."""
    if stop <= cursor:
        return cursor
    position = cursor
    for match in LINE_BREAK_PATTERN.finditer(source, cursor, stop):
        if match.start() > position:
            builder.add_markup(position, match.start(), source[position : match.start()])
        if in_prose:
            builder.add_text(match.start(), match.end(), " ")
        else:
            builder.add_text(match.start(), match.end(), match.group())
        position = match.end()
    if stop > position:
        builder.add_markup(position, stop, source[position:stop])
    return stop
