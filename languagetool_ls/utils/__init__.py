"""Utility modules shared across the language server."""

from __future__ import annotations

from . import position_utils

__all__ = [
    "position_utils",
]
