"""Workspace settings sent by the client in ``workspace/didChangeConfiguration``.

The client sends an object shaped like::

    {"languageTool": {"language": "en-US", "disabledRules": [], "ignoredWords": []}}
"""

from __future__ import annotations

import logging
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

LOGGER = logging.getLogger(__name__)

SETTINGS_SECTION = "languageTool"


class WorkspaceSettings(BaseModel):
    """Settings from the ``languageTool`` section of the client configuration."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    language: str | None = None
    disabled_rules: List[str] = Field(default_factory=list, alias="disabledRules")
    ignored_words: List[str] = Field(default_factory=list, alias="ignoredWords")

    @field_validator("language", mode="before")
    def _strip_language(cls, value: object) -> str | None:
        if value is None:
            return None
        return str(value).strip() or None

    @field_validator("disabled_rules", "ignored_words", mode="before")
    def _normalise_list(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple, set)):
            raise ValueError("expected a list of strings")
        return [str(x).strip() for x in value if str(x).strip()]


def parse_workspace_settings(settings: Any) -> WorkspaceSettings | None:
    """Return the parsed ``languageTool`` section, or None when it is unusable."""
    if not isinstance(settings, dict):
        LOGGER.warning("Ignoring configuration change without a settings object")
        return None
    section = settings.get(SETTINGS_SECTION)
    if not isinstance(section, dict):
        LOGGER.warning("Ignoring configuration change without a '%s' section", SETTINGS_SECTION)
        return None
    try:
        return WorkspaceSettings.model_validate(section)
    except ValidationError as exc:
        LOGGER.error("Invalid %s settings: %s", SETTINGS_SECTION, exc)
        return None
