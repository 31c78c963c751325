from __future__ import annotations

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from languagetool_ls.errors import AnnotationError, UnsupportedNesting
from languagetool_ls.markup import Node, ParsedDocument, annotate, parse_markdown
from languagetool_ls.models import NodeKind


def _annotate(source: str):
    return annotate(parse_markdown(source))


def _assert_partition(annotated, source: str) -> None:
    position = 0
    for segment in annotated.segments:
        assert segment.start == position
        assert segment.end >= segment.start
        position = segment.end
    assert position == len(source)


def test_heading_and_paragraph_keep_block_boundary() -> None:
    """Block boundaries stay as newlines while link syntax is stripped."""
    source = "# Heading\nParagraph with\nmultiple lines and [link](example.com)"

    annotated = _annotate(source)

    assert annotated.plain_text == "Heading\nParagraph with multiple lines and link"


def test_line_breaks_fold_inside_paragraph() -> None:
    annotated = _annotate("Paragraph with\nmultiple lines")

    assert annotated.plain_text == "Paragraph with multiple lines"


def test_crlf_folds_to_single_space() -> None:
    source = "Paragraph with\r\nmultiple lines"

    annotated = _annotate(source)

    assert annotated.plain_text == "Paragraph with multiple lines"
    _assert_partition(annotated, source)


def test_separate_paragraphs_keep_newlines() -> None:
    annotated = _annotate("First one.\n\nSecond one.\n")

    assert annotated.plain_text == "First one.\n\nSecond one.\n"


def test_emphasis_and_code_are_markup() -> None:
    annotated = _annotate("Some *emphasis* and `code` here.")

    assert annotated.plain_text == "Some emphasis and  here."


def test_fenced_code_block_is_markup() -> None:
    source = "Intro text.\n\n```\nx = 1\n```\n\nOutro text."

    annotated = _annotate(source)

    assert "x = 1" not in annotated.plain_text
    assert annotated.plain_text.startswith("Intro text.\n")
    assert annotated.plain_text.endswith("Outro text.")
    _assert_partition(annotated, source)


def test_escape_keeps_escaped_character() -> None:
    """The backslash is markup; the escaped character is analysed."""
    source = "Stars \\*here\\* please."

    annotated = _annotate(source)

    assert annotated.plain_text == "Stars *here* please."
    star = annotated.plain_text.index("*")
    assert source[annotated.original_offset(star)] == "*"


def test_entity_decodes_to_its_character() -> None:
    source = "Fish &amp; chips."

    annotated = _annotate(source)

    assert annotated.plain_text == "Fish & chips."
    amp = annotated.plain_text.index("&")
    assert annotated.original_offset(amp) == source.index("&amp;")
    assert annotated.original_offset(amp + 1, is_end=True) == source.index("&amp;") + 5


@pytest.mark.parametrize(
    "source",
    [
        "",
        "plain",
        "# Heading\nParagraph with\nmultiple lines and [link](example.com)",
        "> quoted *text*\n> continues\n\n- item one\n- item **two**\n",
        "![alt text](img.png) after image\n",
        "Line with hard break  \nnext line\r\n\r\n1. ordered\n2. list\n",
        "<div>\nblock html\n</div>\n\nInline <b>html</b> too.\n",
        "***\n\n    indented code\n\nTrailing paragraph",
        "See [Python](https://python.org).\n![x](y)y\n",
        "Use `foo\nbar` here.\n\nLater foo bar.\n",
    ],
)
def test_segments_partition_source(source: str) -> None:
    """Every source character belongs to exactly one segment."""
    annotated = _annotate(source)

    _assert_partition(annotated, source)


@pytest.mark.parametrize(
    "source",
    [
        "# Heading\nParagraph with\nmultiple lines and [link](example.com)",
        "> quoted *text*\n> continues\n\n- item one\n- item **two**\n",
        "Fish &amp; chips \\* and `code`.\r\nMore text.",
        "See [Python](https://python.org). And ![alt](img.png \"t\")!\n",
        "Use `foo\nbar` here, it is teh best.\n\nLater foo bar appears.\n",
    ],
)
def test_plain_to_original_mapping_is_monotonic(source: str) -> None:
    """Plain offsets map to non-decreasing source offsets and back again."""
    annotated = _annotate(source)

    mapped = [annotated.original_offset(i) for i in range(len(annotated.plain_text) + 1)]
    assert mapped == sorted(mapped)
    for plain, original in enumerate(mapped):
        assert 0 <= original <= len(source)
        assert annotated.plain_offset(original) == plain


def test_text_characters_come_from_their_source() -> None:
    source = "# Title\n\nA [link](http://x.y) and *more* words."

    annotated = _annotate(source)

    for index, char in enumerate(annotated.plain_text):
        if char in " \n":
            continue
        assert source[annotated.original_offset(index)] == char


def test_nested_paragraph_is_rejected() -> None:
    """A paragraph inside a paragraph fails instead of producing garbled text."""
    source = "outer inner"
    inner = Node(
        kind=NodeKind.PARAGRAPH,
        start=6,
        end=11,
        children=(Node(kind=NodeKind.TEXT, start=6, end=11, text="inner"),),
    )
    outer = Node(
        kind=NodeKind.PARAGRAPH,
        start=0,
        end=11,
        children=(Node(kind=NodeKind.TEXT, start=0, end=5, text="outer"), inner),
    )
    root = Node(kind=NodeKind.DOCUMENT, start=0, end=11, children=(outer,))

    with pytest.raises(UnsupportedNesting):
        annotate(ParsedDocument(source=source, root=root))


def test_overlapping_text_leaves_are_rejected() -> None:
    source = "abcdef"
    paragraph = Node(
        kind=NodeKind.PARAGRAPH,
        start=0,
        end=6,
        children=(
            Node(kind=NodeKind.TEXT, start=0, end=4, text="abcd"),
            Node(kind=NodeKind.TEXT, start=2, end=6, text="cdef"),
        ),
    )
    root = Node(kind=NodeKind.DOCUMENT, start=0, end=6, children=(paragraph,))

    with pytest.raises(AnnotationError):
        annotate(ParsedDocument(source=source, root=root))


def test_unrecognised_kinds_traverse_children() -> None:
    source = "hello"
    other = Node(
        kind=NodeKind.OTHER,
        start=0,
        end=5,
        children=(Node(kind=NodeKind.TEXT, start=0, end=5, text="hello"),),
    )
    root = Node(kind=NodeKind.DOCUMENT, start=0, end=5, children=(other,))

    assert annotate(ParsedDocument(source=source, root=root)).plain_text == "hello"


def test_punctuation_after_link_maps_past_destination() -> None:
    """Text after a link is found after its ``](url)``, never inside the URL."""
    source = "See [Python](https://python.org).\n"

    annotated = _annotate(source)

    assert annotated.plain_text == "See Python.\n"
    dot = annotated.plain_text.index(".")
    assert annotated.original_offset(dot) == source.index(").") + 1


def test_text_after_image_maps_past_destination() -> None:
    source = "![x](y)y\n"

    annotated = _annotate(source)

    assert annotated.plain_text == "xy\n"
    assert annotated.original_offset(1) == 7


def test_link_with_title_and_reference_links() -> None:
    source = (
        'Read [the docs](http://a.b/c_(d) "Docs (v2)"), then [ref][r] or [r].\n'
        "\n"
        "[r]: http://example.com\n"
    )

    annotated = _annotate(source)

    assert annotated.plain_text.startswith("Read the docs, then ref or r.\n")
    _assert_characters_from_source(annotated, source)


def test_autolink_is_followed_by_its_own_text() -> None:
    source = "Visit <https://python.org>, it is good.\n"

    annotated = _annotate(source)

    assert annotated.plain_text == "Visit https://python.org, it is good.\n"
    _assert_characters_from_source(annotated, source)


def test_code_span_across_lines_keeps_later_prose() -> None:
    """A wrapped code span must not swallow the text after it."""
    source = "Use `foo\nbar` here, it is teh best.\n\nLater foo bar appears.\n"

    annotated = _annotate(source)

    # The line break inside the dropped code span still folds to a space.
    assert annotated.plain_text == "Use   here, it is teh best.\n\nLater foo bar appears.\n"
    _assert_characters_from_source(annotated, source)


def test_double_backtick_code_span() -> None:
    source = "Run ``a ` b`` now.\n"

    assert _annotate(source).plain_text == "Run  now.\n"


def _assert_characters_from_source(annotated, source: str) -> None:
    for index, char in enumerate(annotated.plain_text):
        if char in " \n":
            continue
        assert source[annotated.original_offset(index)] == char
