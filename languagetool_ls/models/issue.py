"""Issue model for findings reported by LanguageTool.

Offsets are expressed in the analyzable (plain) text that was sent to the
engine, never in the original document.
"""

from __future__ import annotations

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Issue(BaseModel):
    """A single LanguageTool finding.

    - start / end: half-open offsets into the analyzable text
    - message: engine-provided message
    - replacements: suggested replacements, in engine order
    - rule_id: engine rule identifier
    - rule_description: human-readable rule description (falls back to rule_id)
    - issue_type: engine issue type (e.g. "misspelling", "grammar")
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    message: str
    replacements: List[str] = Field(default_factory=list)
    rule_id: str
    rule_description: str = ""
    issue_type: str = "unknown"

    @field_validator("rule_id", "rule_description", "issue_type", mode="before")
    def _strip_strings(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("message", mode="before")
    def _strip_message(cls, value: object) -> str:
        return str(value or "").strip()

    @field_validator("replacements", mode="before")
    def _normalise_replacements(cls, value: object) -> List[str]:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            # Replacements may legitimately be whitespace (e.g. a single space).
            return [str(x) for x in value if str(x)]
        return [str(value)]

    @model_validator(mode="before")
    @classmethod
    def _default_description(cls, data: Any) -> Any:
        if isinstance(data, dict) and not str(data.get("rule_description") or "").strip():
            data = {**data, "rule_description": data.get("rule_id")}
        return data

    @model_validator(mode="after")
    def final_checks(self) -> "Issue":
        if self.end < self.start:
            raise ValueError("end must not precede start")
        if not self.rule_id:
            raise ValueError("rule_id must not be empty")
        return self

    @classmethod
    def from_match(cls, match: Any) -> "Issue":
        """Create an Issue from a ``language_tool_python`` ``Match``.

        ``Match`` discards the rule description from the server response, so
        ``ruleDescription`` is only used when present (e.g. on test doubles).
        """
        offset = int(getattr(match, "offset", 0) or 0)
        length = int(getattr(match, "errorLength", 0) or 0)
        rule_id = getattr(match, "ruleId", "UNKNOWN") or "UNKNOWN"
        return cls(
            start=offset,
            end=offset + max(length, 0),
            message=getattr(match, "message", ""),
            replacements=list(getattr(match, "replacements", []) or []),
            rule_id=rule_id,
            rule_description=getattr(match, "ruleDescription", None) or rule_id,
            issue_type=getattr(match, "ruleIssueType", None) or "unknown",
        )
