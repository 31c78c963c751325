"""Reduction of marked-up documents to analyzable text."""

from __future__ import annotations

from .annotator import annotate
from .markdown_tree import Node, ParsedDocument, parse_markdown
from .text_selector import select_text

__all__ = ["annotate", "Node", "ParsedDocument", "parse_markdown", "select_text"]
