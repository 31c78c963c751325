"""Command-line entrypoint for the LanguageTool language server."""

from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from dotenv import load_dotenv

from .settings import WorkspaceSettings

LOGGER = logging.getLogger(__name__)

DEFAULT_PORT = 8081
DEFAULT_HOST = "localhost"
ENV_PREFIX = "LANGUAGETOOL_LS"


def _env(name: str) -> str | None:
    value = os.environ.get(f"{ENV_PREFIX}_{name}")
    if value is None or not value.strip():
        return None
    return value.strip()


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Serve LanguageTool grammar and style checks over the Language Server Protocol."
    )
    parser.add_argument(
        "port",
        nargs="?",
        type=int,
        default=None,
        help=f"TCP port to listen on (default: env {ENV_PREFIX}_PORT or {DEFAULT_PORT})",
    )
    parser.add_argument(
        "host",
        nargs="?",
        default=None,
        help=f"Host to bind (default: env {ENV_PREFIX}_HOST or {DEFAULT_HOST})",
    )
    parser.add_argument(
        "--stdio",
        action="store_true",
        help="Serve over stdin/stdout instead of TCP",
    )
    parser.add_argument(
        "--language",
        default=None,
        help=(
            "Language code to check with until the client sends its configuration "
            f"(default: env {ENV_PREFIX}_LANGUAGE; checking is disabled when unset)"
        ),
    )
    parser.add_argument(
        "--remote-server",
        default=None,
        help=(
            "URL of a running LanguageTool server to use instead of starting one "
            f"(default: env {ENV_PREFIX}_REMOTE_SERVER)"
        ),
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file instead of stderr",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.port is None:
        env_port = _env("PORT")
        args.port = int(env_port) if env_port else DEFAULT_PORT
    if args.host is None:
        args.host = _env("HOST") or DEFAULT_HOST
    if args.language is None:
        args.language = _env("LANGUAGE")
    if args.remote_server is None:
        args.remote_server = _env("REMOTE_SERVER")
    return args


def configure_logging(*, verbose: bool, log_file: Path | None) -> None:
    # Never log to stdout: in stdio mode it carries the protocol.
    kwargs: dict = {}
    if log_file is not None:
        kwargs["filename"] = str(log_file)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        **kwargs,
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    # Existing environment variables win over .env entries.
    load_dotenv(override=False)
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, log_file=args.log_file)

    from .language_server import server

    server.remote_server = args.remote_server
    if args.language:
        server.configure(WorkspaceSettings(language=args.language))

    try:
        if args.stdio:
            LOGGER.info("Serving LanguageTool over stdio")
            server.start_io()
        else:
            LOGGER.info("Serving LanguageTool on %s:%d", args.host, args.port)
            server.start_tcp(args.host, args.port)
    except KeyboardInterrupt:
        LOGGER.info("Interrupted; shutting down")
    except OSError as exc:
        LOGGER.error("Could not start server: %s", exc)
        return 1
    finally:
        server.close_tool()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
