"""Language check package exports.

This package exposes the key helpers used by the server so callers can
import from ``languagetool_ls.language_check``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .language_check import DocumentReport, check_document, diagnose_document
    from .language_check_config import DEFAULT_DISABLED_RULES, DEFAULT_IGNORED_WORDS
    from .language_tool_manager import LanguageToolManager

__all__ = [
    "check_document",
    "diagnose_document",
    "DocumentReport",
    "LanguageToolManager",
    "DEFAULT_DISABLED_RULES",
    "DEFAULT_IGNORED_WORDS",
]

_LAZY_EXPORTS = {
    # attribute -> (module, attribute)
    "check_document": (".language_check", "check_document"),
    "diagnose_document": (".language_check", "diagnose_document"),
    "DocumentReport": (".language_check", "DocumentReport"),
    "LanguageToolManager": (".language_tool_manager", "LanguageToolManager"),
    "DEFAULT_DISABLED_RULES": (".language_check_config", "DEFAULT_DISABLED_RULES"),
    "DEFAULT_IGNORED_WORDS": (".language_check_config", "DEFAULT_IGNORED_WORDS"),
}


def __getattr__(name: str):
    """Lazily import and return exported attributes.

    Importing the package does not start pulling in ``language_tool_python``
    until a checking helper is actually used.
    """

    if name in _LAZY_EXPORTS:
        module_name, attr = _LAZY_EXPORTS[name]
        from importlib import import_module

        mod = import_module(module_name, __name__)
        value = getattr(mod, attr)
        globals()[name] = value
        return value
    raise AttributeError(name)


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
