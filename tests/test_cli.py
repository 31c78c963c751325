from __future__ import annotations

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from languagetool_ls.server.cli import DEFAULT_HOST, DEFAULT_PORT, parse_args


def _clear_env(monkeypatch) -> None:
    for name in ("PORT", "HOST", "LANGUAGE", "REMOTE_SERVER"):
        monkeypatch.delenv(f"LANGUAGETOOL_LS_{name}", raising=False)


def test_defaults(monkeypatch) -> None:
    _clear_env(monkeypatch)

    args = parse_args([])

    assert args.port == DEFAULT_PORT == 8081
    assert args.host == DEFAULT_HOST == "localhost"
    assert args.stdio is False
    assert args.language is None
    assert args.remote_server is None


def test_positional_port_and_host(monkeypatch) -> None:
    _clear_env(monkeypatch)

    args = parse_args(["9000", "0.0.0.0", "--language", "en-GB", "-v"])

    assert args.port == 9000
    assert args.host == "0.0.0.0"
    assert args.language == "en-GB"
    assert args.verbose is True


def test_environment_supplies_defaults(monkeypatch) -> None:
    """Environment variables fill in whatever the command line leaves out."""
    _clear_env(monkeypatch)
    monkeypatch.setenv("LANGUAGETOOL_LS_PORT", "9123")
    monkeypatch.setenv("LANGUAGETOOL_LS_LANGUAGE", "de-DE")
    monkeypatch.setenv("LANGUAGETOOL_LS_REMOTE_SERVER", "http://localhost:8010")

    args = parse_args(["--stdio"])

    assert args.port == 9123
    assert args.stdio is True
    assert args.language == "de-DE"
    assert args.remote_server == "http://localhost:8010"


def test_arguments_override_environment(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("LANGUAGETOOL_LS_LANGUAGE", "de-DE")

    assert parse_args(["--language", "fr"]).language == "fr"
