"""Plain text derived from a marked-up source, with a mapping back to it.

An :class:`AnnotatedText` is a sequence of contiguous segments covering the
whole source. ``TEXT`` segments make up the analyzable plain text; ``MARKUP``
segments are dropped from it but keep their place in the source so offsets
can be translated in both directions.
"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass, field
from functools import cached_property

from ..errors import OutOfRange
from .enums import SegmentKind


@dataclass(frozen=True)
class Segment:
    """A contiguous run of source characters.

    Attributes:
        kind: TEXT or MARKUP
        start: Source offset of the first character
        end: Source offset one past the last character
        text: Plain-text contribution for TEXT segments, the raw source for MARKUP
    """

    kind: SegmentKind
    start: int
    end: int
    text: str

    @property
    def span(self) -> int:
        return self.end - self.start

    @property
    def is_identity(self) -> bool:
        """True when every plain character sits on its own source character."""
        return len(self.text) == self.span

    def original_start(self, index: int) -> int:
        """Source offset where plain character ``index`` of this segment begins."""
        if self.is_identity:
            return self.start + index
        return self.start + min(index, max(self.span - 1, 0))

    def original_end(self, index: int) -> int:
        """Source offset just past plain character ``index`` of this segment."""
        if self.is_identity:
            return self.start + index + 1
        if index >= len(self.text) - 1:
            return self.end
        return min(self.start + index + 1, self.end)


@dataclass(frozen=True)
class AnnotatedText:
    """Immutable plain-text view over a source document."""

    segments: tuple[Segment, ...]
    source_length: int
    # Plain-text offset at which each segment starts (markup contributes 0 chars).
    _plain_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        plain_starts: list[int] = []
        position = 0
        for segment in self.segments:
            plain_starts.append(position)
            if segment.kind is SegmentKind.TEXT:
                position += len(segment.text)
        object.__setattr__(self, "_plain_starts", tuple(plain_starts))

    @classmethod
    def identity(cls, text: str) -> "AnnotatedText":
        """Annotated text whose plain text is the whole buffer, unchanged."""
        if not text:
            return cls(segments=(), source_length=0)
        return cls(
            segments=(Segment(SegmentKind.TEXT, 0, len(text), text),),
            source_length=len(text),
        )

    @cached_property
    def plain_text(self) -> str:
        return "".join(
            segment.text for segment in self.segments if segment.kind is SegmentKind.TEXT
        )

    @cached_property
    def _text_indexes(self) -> tuple[int, ...]:
        return tuple(
            index
            for index, segment in enumerate(self.segments)
            if segment.kind is SegmentKind.TEXT and segment.text
        )

    @cached_property
    def _text_plain_starts(self) -> tuple[int, ...]:
        return tuple(self._plain_starts[index] for index in self._text_indexes)

    @cached_property
    def _segment_starts(self) -> tuple[int, ...]:
        return tuple(segment.start for segment in self.segments)

    def _text_segment_at(self, plain_offset: int) -> tuple[Segment, int]:
        """Return the TEXT segment holding ``plain_offset`` and the index within it."""
        position = bisect_right(self._text_plain_starts, plain_offset) - 1
        segment = self.segments[self._text_indexes[position]]
        return segment, plain_offset - self._text_plain_starts[position]

    def original_offset(self, plain_offset: int, *, is_end: bool = False) -> int:
        """Translate a plain-text offset into a source offset.

        With ``is_end`` the offset is an exclusive end: it is mapped to just
        past the preceding plain character, so a range ending right before
        some markup does not stretch over that markup.

        Raises:
            OutOfRange: if ``plain_offset`` is outside ``[0, len(plain_text)]``.
        """
        plain_length = len(self.plain_text)
        if plain_offset < 0 or plain_offset > plain_length:
            raise OutOfRange(plain_offset, plain_length, what="analyzable text")
        if not self._text_indexes:
            return 0

        if is_end and plain_offset > 0:
            segment, index = self._text_segment_at(plain_offset - 1)
            return segment.original_end(index)
        if plain_offset == plain_length:
            return self.segments[self._text_indexes[-1]].end
        segment, index = self._text_segment_at(plain_offset)
        return segment.original_start(index)

    def plain_offset(self, original_offset: int) -> int:
        """Translate a source offset into the plain-text offset it contributes to.

        Offsets inside markup map to the plain position where the markup was
        dropped.

        Raises:
            OutOfRange: if ``original_offset`` is outside ``[0, source_length]``.
        """
        if original_offset < 0 or original_offset > self.source_length:
            raise OutOfRange(original_offset, self.source_length, what="source")
        if original_offset == self.source_length or not self.segments:
            return len(self.plain_text)

        position = bisect_right(self._segment_starts, original_offset) - 1
        segment = self.segments[position]
        plain_start = self._plain_starts[position]
        if segment.kind is SegmentKind.MARKUP:
            return plain_start
        index = original_offset - segment.start
        if not segment.is_identity:
            # Folded or decoded characters: the whole span maps to its first char.
            index = 0 if index < segment.span else len(segment.text)
        return plain_start + min(index, len(segment.text))


class AnnotatedTextBuilder:
    """Accumulates contiguous segments and produces an :class:`AnnotatedText`.

    Adjacent markup segments are merged, as are adjacent identity text
    segments, so walking a source character by character stays compact.
    """

    def __init__(self) -> None:
        self._segments: list[Segment] = []

    @property
    def end(self) -> int:
        return self._segments[-1].end if self._segments else 0

    def add_text(self, start: int, end: int, text: str) -> None:
        self._add(Segment(SegmentKind.TEXT, start, end, text))

    def add_markup(self, start: int, end: int, text: str) -> None:
        self._add(Segment(SegmentKind.MARKUP, start, end, text))

    def _add(self, segment: Segment) -> None:
        if segment.start != self.end:
            raise ValueError(
                f"Segment [{segment.start}, {segment.end}) does not start at {self.end}"
            )
        if segment.end < segment.start:
            raise ValueError(f"Segment [{segment.start}, {segment.end}) is reversed")
        if segment.span == 0 and not segment.text:
            return

        previous = self._segments[-1] if self._segments else None
        if previous is not None and previous.kind is segment.kind:
            mergeable = segment.kind is SegmentKind.MARKUP or (
                previous.is_identity and segment.is_identity
            )
            if mergeable:
                self._segments[-1] = Segment(
                    segment.kind, previous.start, segment.end, previous.text + segment.text
                )
                return
        self._segments.append(segment)

    def build(self, source_length: int) -> AnnotatedText:
        """Return the annotated text, checking the segments cover the source."""
        if self.end != source_length:
            raise ValueError(
                f"Segments cover [0, {self.end}) but the source has {source_length} characters"
            )
        return AnnotatedText(segments=tuple(self._segments), source_length=source_length)
