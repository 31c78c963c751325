"""Range comparisons used to scope quick fixes to a selection."""

from __future__ import annotations

from typing import Iterable

from lsprotocol import types as lsp


def _key(position: lsp.Position) -> tuple[int, int]:
    return (position.line, position.character)


def overlaps(first: lsp.Range, second: lsp.Range) -> bool:
    """Return True when the two ranges share at least one position.

    Boundaries are inclusive: ranges that only touch at an endpoint overlap,
    so a caret placed right after a word still sees that word's fixes.
    """
    return _key(first.start) <= _key(second.end) and _key(second.start) <= _key(first.end)


def filter_overlapping(
    query: lsp.Range, diagnostics: Iterable[lsp.Diagnostic]
) -> list[lsp.Diagnostic]:
    """Return the diagnostics whose range overlaps ``query``, in order."""
    return [diagnostic for diagnostic in diagnostics if overlaps(query, diagnostic.range)]
