"""Mapping of analyzer issues onto editor diagnostics and quick fixes."""

from __future__ import annotations

from .diagnostic_mapper import ANALYZER_NAME, build_diagnostics, to_diagnostic
from .edit_commands import (
    ACCEPT_SUGGESTION_COMMAND,
    build_edit,
    build_edit_command,
    build_edit_commands,
    parse_edit_argument,
)
from .range_utils import filter_overlapping, overlaps

__all__ = [
    "ACCEPT_SUGGESTION_COMMAND",
    "ANALYZER_NAME",
    "build_diagnostics",
    "build_edit",
    "build_edit_command",
    "build_edit_commands",
    "filter_overlapping",
    "overlaps",
    "parse_edit_argument",
    "to_diagnostic",
]
