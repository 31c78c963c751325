"""Language Server Protocol front end."""

from __future__ import annotations

from .settings import WorkspaceSettings, parse_workspace_settings

__all__ = ["WorkspaceSettings", "parse_workspace_settings"]
