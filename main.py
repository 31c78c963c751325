"""Command-line entrypoint for the LanguageTool language server."""

from __future__ import annotations

from languagetool_ls.server.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
