"""Public model exports for the project.

Other modules and tests should import
``from languagetool_ls.models import Issue, AnnotatedText``.
"""

from __future__ import annotations

from .annotated_text import AnnotatedText, AnnotatedTextBuilder, Segment
from .document import SUPPORTED_URI_SCHEMES, SourceDocument
from .enums import ContentType, NodeKind, SegmentKind
from .issue import Issue

__all__ = [
    "AnnotatedText",
    "AnnotatedTextBuilder",
    "ContentType",
    "Issue",
    "NodeKind",
    "Segment",
    "SegmentKind",
    "SourceDocument",
    "SUPPORTED_URI_SCHEMES",
]
