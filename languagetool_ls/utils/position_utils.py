"""Conversions between absolute character offsets and LSP positions.

Functions:
    - find_line_starts: Offsets at which each line of a buffer begins
    - code_units: Length of a string in a position encoding's code units
    - index_from_code_units: Character index reached after some code units
    - DocumentPositionCalculator: offset <-> (line, character) for one buffer

Lines end with ``\\n``, ``\\r\\n`` or a lone ``\\r``. A terminator belongs
to the line it ends; the next line starts at column 0 after it. Offsets are
Python character indexes; columns are counted in the code units of the
negotiated position encoding (UTF-16 unless the client chose otherwise).
"""

from __future__ import annotations

import logging
import re
from bisect import bisect_right

from lsprotocol import types as lsp

from ..errors import OutOfRange

LOGGER = logging.getLogger(__name__)

LINE_BREAK_PATTERN = re.compile(r"\r\n|\r|\n")

DEFAULT_POSITION_ENCODING = lsp.PositionEncodingKind.Utf16


def find_line_starts(text: str) -> list[int]:
    """Return the offset of the first character of every line in ``text``.

    Example:
        >>> find_line_starts("ab\\r\\ncd\\n")
        [0, 4, 7]
    """
    starts = [0]
    starts.extend(match.end() for match in LINE_BREAK_PATTERN.finditer(text))
    return starts


def _char_units(char: str, encoding: str) -> int:
    if encoding == lsp.PositionEncodingKind.Utf32:
        return 1
    if encoding == lsp.PositionEncodingKind.Utf8:
        return len(char.encode("utf-8", errors="surrogatepass"))
    return 1 if ord(char) <= 0xFFFF else 2


def code_units(text: str, encoding: str = DEFAULT_POSITION_ENCODING) -> int:
    """Return the length of ``text`` in code units of ``encoding``."""
    if not text:
        return 0
    if encoding == lsp.PositionEncodingKind.Utf32:
        return len(text)
    if encoding == lsp.PositionEncodingKind.Utf8:
        return len(text.encode("utf-8", errors="surrogatepass"))
    return len(text.encode("utf-16-le", errors="surrogatepass")) // 2


def index_from_code_units(
    text: str, units: int, encoding: str = DEFAULT_POSITION_ENCODING
) -> int:
    """Return how many characters of ``text`` fit in ``units`` code units.

    A column pointing into the middle of a character resolves to the start
    of that character.
    """
    remaining = max(0, int(units))
    index = 0
    while index < len(text):
        width = _char_units(text[index], encoding)
        if remaining < width:
            break
        remaining -= width
        index += 1
    return index


class DocumentPositionCalculator:
    """Translate offsets in one immutable text buffer to positions and back.

    Line starts are computed once, so each lookup is a binary search.

    Args:
        text: The buffer to index
        strict: Raise :class:`OutOfRange` for offsets outside the buffer
            instead of clamping them
        encoding: Position encoding used for columns (``utf-8``, ``utf-16``
            or ``utf-32``)
    """

    def __init__(
        self,
        text: str,
        *,
        strict: bool = False,
        encoding: str = DEFAULT_POSITION_ENCODING,
    ) -> None:
        self.text = text
        self.strict = strict
        self.encoding = encoding
        self._line_starts = find_line_starts(text)

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def _clamp_offset(self, offset: int) -> int:
        if 0 <= offset <= len(self.text):
            return offset
        if self.strict:
            raise OutOfRange(offset, len(self.text))
        LOGGER.warning(
            "Offset %d outside document of length %d; clamping", offset, len(self.text)
        )
        return max(0, min(offset, len(self.text)))

    def _clamp_line(self, line: int) -> int:
        if 0 <= line < self.line_count:
            return line
        if self.strict:
            raise OutOfRange(line, self.line_count, what="line table")
        return max(0, min(line, self.line_count - 1))

    def line_start(self, line: int) -> int:
        """Offset of the first character of ``line``."""
        return self._line_starts[self._clamp_line(line)]

    def line_end(self, line: int) -> int:
        """Offset just past the last character of ``line``, excluding its terminator."""
        line = self._clamp_line(line)
        if line + 1 >= self.line_count:
            return len(self.text)
        end = self._line_starts[line + 1]
        match = LINE_BREAK_PATTERN.match(self.text, end - 2 if end >= 2 else 0, end)
        if match is not None and match.end() == end:
            return match.start()
        return end - 1

    def position_of(self, offset: int) -> lsp.Position:
        """Return the 0-based position of ``offset``.

        ``offset == len(text)`` is the position just past the last character.
        """
        offset = self._clamp_offset(offset)
        line = bisect_right(self._line_starts, offset) - 1
        prefix = self.text[self._line_starts[line] : offset]
        return lsp.Position(line=line, character=code_units(prefix, self.encoding))

    def offset_of(self, position: lsp.Position) -> int:
        """Return the offset of ``position``.

        Columns past the end of a line resolve to the line's last character
        (its terminator, when it has one).
        """
        line = self._clamp_line(position.line)
        start = self._line_starts[line]
        if line + 1 < self.line_count:
            last = self._line_starts[line + 1] - 1
        else:
            last = len(self.text)
        character = max(0, position.character)
        line_text = self.text[start:last]
        if self.strict and character > code_units(line_text, self.encoding):
            raise OutOfRange(character, last - start, what=f"line {line}")
        return start + index_from_code_units(line_text, character, self.encoding)

    def range_of(self, start: int, end: int) -> lsp.Range:
        """Return the range covering the half-open offsets ``[start, end)``."""
        return lsp.Range(start=self.position_of(start), end=self.position_of(end))
