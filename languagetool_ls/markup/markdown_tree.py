"""Markdown parsing into a node tree with source offsets.

``markdown-it-py`` produces a flat token stream: block tokens carry line
ranges (``token.map``) and inline tokens carry no positions at all. This
module rebuilds a tree of :class:`Node` objects and locates every inline
leaf in the original source by searching forward from a cursor, so the
annotator can work with exact character offsets.

Inline searches never run past the end of the enclosing block, so a leaf
that cannot be found only loses itself, never the rest of the document.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Sequence

from markdown_it import MarkdownIt
from markdown_it.helpers import parseLinkDestination, parseLinkTitle
from markdown_it.token import Token

from ..models.enums import NodeKind
from ..utils.position_utils import DocumentPositionCalculator

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Node:
    """A node of a parsed structured document.

    Attributes:
        kind: Node kind
        start: Source offset where the node begins
        end: Source offset just past the node
        text: Literal content for TEXT leaves (may differ from the source
            slice for escapes and entities)
        children: Child nodes in document order
    """

    kind: NodeKind
    start: int
    end: int
    text: str = ""
    children: tuple["Node", ...] = ()


@dataclass(frozen=True)
class ParsedDocument:
    """A parsed document: its raw source and the root of its node tree."""

    source: str
    root: Node


# Opening token types (without the "_open" suffix) and the node kind they build.
_CONTAINER_KINDS: dict[str, NodeKind] = {
    "paragraph": NodeKind.PARAGRAPH,
    "heading": NodeKind.HEADING,
    "blockquote": NodeKind.BLOCK_QUOTE,
    "bullet_list": NodeKind.LIST,
    "ordered_list": NodeKind.LIST,
    "list_item": NodeKind.LIST_ITEM,
    "link": NodeKind.LINK,
    "em": NodeKind.EMPHASIS,
    "strong": NodeKind.STRONG,
}

_LEAF_BLOCK_KINDS: dict[str, NodeKind] = {
    "fence": NodeKind.CODE_BLOCK,
    "code_block": NodeKind.CODE_BLOCK,
    "html_block": NodeKind.HTML,
    "hr": NodeKind.THEMATIC_BREAK,
}

# Line breaks inside a paragraph are not nodes: the annotator sees them as
# gap characters between the surrounding text leaves.
_IGNORED_INLINE_TYPES = {"softbreak", "hardbreak"}

_LINK_SPACE = " \t\r\n"


@lru_cache(maxsize=None)
def _backtick_run(run: str) -> "re.Pattern[str]":
    """Pattern matching exactly ``run``, not part of a longer backtick run."""
    return re.compile(r"(?<!`)" + re.escape(run) + r"(?!`)")


def build_parser() -> MarkdownIt:
    """Return the CommonMark parser used for annotation.

    ``text_join`` is disabled so escapes and entities stay separate
    ``text_special`` tokens that can be located in the source.
    """
    return MarkdownIt("commonmark").disable("text_join", ignoreInvalid=True)


@dataclass
class _Frame:
    """A container under construction."""

    kind: NodeKind
    start: int | None
    end: int | None
    markup: str = ""
    children: list[Node] = field(default_factory=list)

    def close(self, fallback: int) -> Node:
        children = tuple(self.children)
        start = self.start
        end = self.end
        if start is None:
            start = children[0].start if children else fallback
        if end is None:
            end = children[-1].end if children else start
        return Node(kind=self.kind, start=start, end=max(start, end), children=children)


class _TreeBuilder:
    """Converts a token stream into nodes for one source string."""

    def __init__(self, source: str) -> None:
        self.source = source
        self.calculator = DocumentPositionCalculator(source)
        # Search position for locating inline content in the source.
        self.cursor = 0
        # End of the innermost block; inline searches stop here.
        self.limit = len(source)

    def block_span(self, token: Token) -> tuple[int | None, int | None]:
        if not token.map:
            return None, None
        first_line, last_line = token.map
        start = self.calculator.line_start(first_line)
        end = self.calculator.line_end(max(first_line, last_line - 1))
        return start, end

    def locate(self, needle: str) -> int | None:
        if not needle:
            return None
        index = self.source.find(needle, self.cursor, self.limit)
        if index < 0:
            return None
        return index

    def _block_limit(self, stack: Sequence[_Frame]) -> int:
        for frame in reversed(stack):
            if frame.end is not None:
                return frame.end
        return len(self.source)

    def build(self, tokens: Sequence[Token]) -> Node:
        root = _Frame(NodeKind.DOCUMENT, 0, len(self.source))
        stack = [root]
        self._consume(tokens, stack)
        # Close anything left open by a truncated stream.
        while len(stack) > 1:
            frame = stack.pop()
            stack[-1].children.append(frame.close(self.cursor))
        return root.close(0)

    def _consume(self, tokens: Iterable[Token], stack: list[_Frame]) -> None:
        for token in tokens:
            if token.nesting == 1:
                kind = _CONTAINER_KINDS.get(token.type.removesuffix("_open"), NodeKind.OTHER)
                start, end = self.block_span(token)
                if start is not None:
                    self.cursor = max(self.cursor, start)
                if end is not None:
                    self.limit = end
                stack.append(_Frame(kind, start, end, markup=token.markup))
            elif token.nesting == -1:
                if len(stack) <= 1:
                    LOGGER.debug("Unbalanced closing token %s ignored", token.type)
                    continue
                frame = stack.pop()
                if frame.kind is NodeKind.LINK:
                    self._skip_link_tail(autolink=frame.markup == "autolink")
                    frame.end = self.cursor
                node = frame.close(self.cursor)
                stack[-1].children.append(node)
                if frame.end is not None:
                    self.cursor = max(self.cursor, frame.end)
                if frame.start is not None:
                    # Only block frames (those with a line map) narrow the limit.
                    self.limit = self._block_limit(stack)
            elif token.type == "inline":
                self._consume(token.children or [], stack)
            else:
                node = self._leaf(token)
                if node is not None:
                    stack[-1].children.append(node)

    def _leaf(self, token: Token) -> Node | None:
        if token.type in _IGNORED_INLINE_TYPES:
            return None

        if token.type in _LEAF_BLOCK_KINDS:
            start, end = self.block_span(token)
            if start is None or end is None:
                return None
            self.cursor = max(self.cursor, end)
            return Node(kind=_LEAF_BLOCK_KINDS[token.type], start=start, end=end)

        if token.type == "text":
            return self._text_leaf(token.content, token.content)

        if token.type == "text_special":
            return self._special_leaf(token)

        if token.type == "code_inline":
            return self._code_leaf(token)

        if token.type == "html_inline":
            index = self.locate(token.content)
            if index is None:
                return None
            self.cursor = index + len(token.content)
            return Node(kind=NodeKind.HTML, start=index, end=self.cursor)

        if token.type == "image":
            return self._image(token)

        LOGGER.debug("Unrecognised leaf token %s ignored", token.type)
        return None

    def _text_leaf(self, needle: str, text: str, *, skip: int = 0) -> Node | None:
        index = self.locate(needle)
        if index is None:
            LOGGER.debug("Could not locate %r in source after offset %d", needle, self.cursor)
            return None
        self.cursor = index + len(needle)
        return Node(kind=NodeKind.TEXT, start=index + skip, end=self.cursor, text=text)

    def _special_leaf(self, token: Token) -> Node | None:
        if token.info == "escape" and token.markup.startswith("\\"):
            # The backslash stays markup; the escaped character is text.
            return self._text_leaf(token.markup, token.content, skip=1)
        # Entities decode to a different string than the source slice.
        return self._text_leaf(token.markup or token.content, token.content)

    def _code_leaf(self, token: Token) -> Node | None:
        # The token's content has line breaks folded to spaces, so the span
        # is delimited by its backtick runs instead.
        pattern = _backtick_run(token.markup or "`")
        opening = pattern.search(self.source, self.cursor, self.limit)
        if opening is None:
            return None
        closing = pattern.search(self.source, opening.end(), self.limit)
        if closing is None:
            return None
        self.cursor = closing.end()
        return Node(kind=NodeKind.CODE, start=opening.start(), end=self.cursor)

    def _skip_space(self, position: int) -> int:
        while position < self.limit and self.source[position] in _LINK_SPACE:
            position += 1
        return position

    def _skip_link_tail(self, *, autolink: bool) -> None:
        """Move the cursor past the syntax closing a link or image.

        That is ``>`` for an autolink, otherwise ``]`` followed by an inline
        destination ``(url "title")`` or a reference label ``[label]``.
        """
        closer = self.source.find(">" if autolink else "]", self.cursor, self.limit)
        if closer < 0:
            return
        self.cursor = closer + 1
        if autolink or self.cursor >= self.limit:
            return
        if self.source[self.cursor] == "(":
            self._skip_destination(self.cursor + 1)
        elif self.source[self.cursor] == "[":
            label_end = self.source.find("]", self.cursor, self.limit)
            if label_end >= 0:
                self.cursor = label_end + 1

    def _skip_destination(self, position: int) -> None:
        position = self._skip_space(position)
        destination = parseLinkDestination(self.source, position, self.limit)
        if destination.ok:
            position = self._skip_space(destination.pos)
            title = parseLinkTitle(self.source, position, self.limit)
            if title.ok:
                position = self._skip_space(title.pos)
        if position < self.limit and self.source[position] == ")":
            self.cursor = position + 1
            return
        closing = self.source.find(")", position, self.limit)
        if closing >= 0:
            self.cursor = closing + 1

    def _image(self, token: Token) -> Node:
        frame = _Frame(NodeKind.IMAGE, None, None)
        self._consume(token.children or [], [frame])
        self._skip_link_tail(autolink=False)
        frame.end = self.cursor
        return frame.close(self.cursor)


def parse_markdown(source: str, *, parser: MarkdownIt | None = None) -> ParsedDocument:
    """Parse ``source`` as CommonMark and return a tree with source offsets."""
    tokens = (parser or build_parser()).parse(source)
    root = _TreeBuilder(source).build(tokens)
    return ParsedDocument(source=source, root=root)
