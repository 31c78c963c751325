"""LanguageTool setup helpers.

This module centralises LanguageTool instantiation so that custom spellings,
disabled rules and server configuration stay in one place.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import language_tool_python

from .language_check_config import DEFAULT_SERVER_CONFIG


class LanguageToolManager:
    """Factory class responsible for configuring LanguageTool instances."""

    def __init__(
        self,
        *,
        ignored_words: Iterable[str] | None = None,
        disabled_rules: Iterable[str] | None = None,
        remote_server: str | None = None,
        config: dict[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self.remote_server = remote_server or None
        self.config = dict(config) if config is not None else dict(DEFAULT_SERVER_CONFIG)
        self.disabled_rules = set(disabled_rules or [])
        self._ignored_words = self._prepare_ignored_words(ignored_words)
        self._spellings_registered: set[str] = set()

    @property
    def ignored_words(self) -> tuple[str, ...]:
        return self._ignored_words

    @staticmethod
    def _prepare_ignored_words(words: Iterable[str] | None) -> tuple[str, ...]:
        if not words:
            return tuple()
        deduped: list[str] = []
        seen: set[str] = set()
        for word in words:
            if word is None:
                continue
            cleaned = word.strip()
            if not cleaned or cleaned in seen:
                continue
            deduped.append(cleaned)
            seen.add(cleaned)
        deduped.sort()
        return tuple(deduped)

    def _prepare_new_spellings(self, language: str) -> list[str] | None:
        # Remote servers do not accept custom spellings; the ignored-word
        # filter in language_check covers them instead.
        if not self._ignored_words or self.remote_server:
            return None
        if language in self._spellings_registered:
            return None
        self._spellings_registered.add(language)
        self.logger.info(
            "Registering %d custom spellings with LanguageTool (%s)",
            len(self._ignored_words),
            language,
        )
        return list(self._ignored_words)

    def build_tool(
        self,
        language: str,
        *,
        extra_disabled_rules: Iterable[str] | None = None,
    ) -> Any:
        """Build a LanguageTool instance for ``language``.

        Raises:
            ValueError: if LanguageTool does not support ``language``.
        """

        kwargs: dict[str, Any] = {}
        if self.remote_server:
            kwargs["remote_server"] = self.remote_server
        elif self.config:
            kwargs["config"] = self.config
        new_spellings = self._prepare_new_spellings(language)
        if new_spellings:
            kwargs["newSpellings"] = new_spellings
            kwargs["new_spellings_persist"] = False

        tool = language_tool_python.LanguageTool(language, **kwargs)

        rules = set(self.disabled_rules)
        if extra_disabled_rules:
            rules.update(extra_disabled_rules)
        if rules:
            tool.disabled_rules = set(rules)
        self.logger.info(
            "Created LanguageTool for language: %s (%d rule(s) disabled)",
            language,
            len(rules),
        )
        return tool
