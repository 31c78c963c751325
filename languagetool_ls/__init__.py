"""LanguageTool language server package."""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "diagnostics",
    "language_check",
    "markup",
    "models",
    "server",
    "utils",
]
