"""Language checks for editor documents.

This module turns a document snapshot into analyzable text, runs
LanguageTool on it, and maps the findings back onto the document as
diagnostics. Failures never escape to the caller as exceptions: a document
that cannot be checked simply has no diagnostics.
"""

from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Iterable

from language_tool_python.utils import LanguageToolError
from lsprotocol import types as lsp

from ..diagnostics.diagnostic_mapper import build_diagnostics
from ..errors import AnnotationError, UnsupportedContentType
from ..markup.text_selector import select_text
from ..models.annotated_text import AnnotatedText
from ..models.document import SourceDocument
from ..models.issue import Issue
from ..utils.position_utils import DEFAULT_POSITION_ENCODING, DocumentPositionCalculator
from .language_check_config import (
    DEFAULT_IGNORED_WORDS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BASE_DELAY,
    DEFAULT_RETRY_MAX_DELAY,
)

LOGGER = logging.getLogger(__name__)


# Transient errors that should trigger a retry
TRANSIENT_ERRORS = (
    ConnectionError,
    TimeoutError,
    OSError,  # Covers socket.error and other OS-level issues
)

# language_tool_python wraps connection-level errors in LanguageToolError.
TRANSIENT_ERRORS = TRANSIENT_ERRORS + (LanguageToolError,)


def _retry_with_backoff(
    func: Any,
    func_arg: Any,
    max_retries: int = DEFAULT_MAX_RETRIES,
    base_delay: float = DEFAULT_RETRY_BASE_DELAY,
    max_delay: float = DEFAULT_RETRY_MAX_DELAY,
) -> Any:
    """Execute a function with exponential backoff retry logic.

    Args:
            func: The function to call (e.g., tool.check)
            func_arg: The argument to pass to func (e.g., text)
            max_retries: Maximum number of retry attempts (total attempts = max_retries + 1)
            base_delay: Initial delay in seconds
            max_delay: Maximum delay in seconds

    Returns:
            The return value of func

    Raises:
            The last exception if all retries fail
    """
    for attempt in range(max_retries + 1):
        try:
            return func(func_arg)
        except TRANSIENT_ERRORS as exc:
            if attempt >= max_retries:
                LOGGER.error(
                    "Language check failed after %d attempt(s): %s",
                    attempt + 1,
                    exc,
                )
                raise

            delay = base_delay * (2**attempt)
            # Jitter keeps concurrent editors from retrying in lockstep
            jitter = random.uniform(0.75, 1.25)
            delay = min(delay * jitter, max_delay)

            LOGGER.warning(
                "Language check attempt %d failed (transient error: %s); "
                "retrying in %.1f second(s)...",
                attempt + 1,
                type(exc).__name__,
                delay,
            )
            time.sleep(delay)

    raise RuntimeError("Retry logic completed without returning or raising")


@dataclass
class DocumentReport:
    """Issues found in one document snapshot, with what is needed to map them."""

    document: SourceDocument
    annotated: AnnotatedText
    issues: list[Issue]

    def diagnostics(
        self, position_encoding: str = DEFAULT_POSITION_ENCODING
    ) -> list[lsp.Diagnostic]:
        calculator = DocumentPositionCalculator(
            self.document.text, encoding=position_encoding
        )
        return build_diagnostics(self.issues, self.annotated, calculator)


def _is_ignored(matched_text: str, words_to_ignore: set[str]) -> bool:
    """Return True when the matched text is an ignored word.

    Acronym forms (all capitals, optionally with a plural "s") are compared
    on their letters only, so "CPUs" is ignored when "CPU" is.
    """
    original_text = matched_text.strip()
    if not original_text:
        return False
    letters = "".join(ch for ch in original_text if ch.isalpha())
    if letters and (letters.isupper() or letters.rstrip("s").isupper()):
        return letters in words_to_ignore or letters.rstrip("s") in words_to_ignore
    return original_text in words_to_ignore


def _filter_issues(
    issues: list[Issue], plain_text: str, words_to_ignore: set[str]
) -> list[Issue]:
    """Filter issues whose matched text is configured to be ignored."""

    if not words_to_ignore:
        return list(issues)
    return [
        issue
        for issue in issues
        if not _is_ignored(plain_text[issue.start : issue.end], words_to_ignore)
    ]


def _collect_ignored_words(extra_words: Iterable[str] | None) -> set[str]:
    """Return the union of default ignored words and any extras."""
    words = set(DEFAULT_IGNORED_WORDS)
    if extra_words:
        words.update(extra_words)
    return words


def _make_issues(matches: Iterable[Any], plain_length: int) -> list[Issue]:
    issues: list[Issue] = []
    for match in matches:
        try:
            issue = Issue.from_match(match)
        except (TypeError, ValueError):
            LOGGER.warning(
                "Skipping malformed LanguageTool match (rule=%s)",
                getattr(match, "ruleId", "UNKNOWN"),
                exc_info=True,
            )
            continue
        if issue.end > plain_length:
            LOGGER.warning(
                "Issue %s at [%d, %d) exceeds analyzed text of length %d",
                issue.rule_id,
                issue.start,
                issue.end,
                plain_length,
            )
        issues.append(issue)
    return issues


def check_document(
    document: SourceDocument,
    tool: Any,
    *,
    ignored_words: Iterable[str] | None = None,
) -> DocumentReport:
    """Run LanguageTool on the analyzable text of ``document``.

    Args:
            document: Document snapshot to check
            tool: LanguageTool instance (anything with a ``check(text)`` method)
            ignored_words: Additional words to filter from results

    Raises:
            UnsupportedContentType: if the document's language id is not supported
            AnnotationError: if the document cannot be annotated
            LanguageToolError, OSError: if LanguageTool keeps failing after retries
    """
    annotated = select_text(document.text, document.language_id)
    plain_text = annotated.plain_text
    if not plain_text.strip():
        return DocumentReport(document=document, annotated=annotated, issues=[])

    matches = _retry_with_backoff(tool.check, plain_text)
    issues = _make_issues(matches or [], len(plain_text))
    words_to_ignore = _collect_ignored_words(ignored_words)
    issues = _filter_issues(issues, plain_text, words_to_ignore)

    LOGGER.debug("Checked %s: %d issue(s)", document.uri, len(issues))
    return DocumentReport(document=document, annotated=annotated, issues=issues)


def diagnose_document(
    document: SourceDocument,
    tool: Any | None,
    *,
    ignored_words: Iterable[str] | None = None,
    position_encoding: str = DEFAULT_POSITION_ENCODING,
) -> list[lsp.Diagnostic]:
    """Return the diagnostics to publish for ``document``.

    Returns an empty list when checking is disabled (``tool`` is None), when
    the URI scheme is not checked, or when the document cannot be checked.
    Columns are counted in ``position_encoding`` code units.
    """
    if tool is None or not document.has_supported_scheme:
        return []

    try:
        report = check_document(document, tool, ignored_words=ignored_words)
    except UnsupportedContentType as exc:
        LOGGER.debug("Skipping %s: %s", document.uri, exc)
        return []
    except AnnotationError:
        LOGGER.exception("Could not annotate %s", document.uri)
        return []
    except TRANSIENT_ERRORS:
        LOGGER.exception("Language check failed for %s after all retries", document.uri)
        return []

    return report.diagnostics(position_encoding)
