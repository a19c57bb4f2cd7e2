"""
Tests for the route-profit command line interface.

Network-free: only commands that touch the local state file are run
end to end; report formatting is tested directly.
"""

from pathlib import Path
from typing import List

import pytest

from src.route_profit.application import cli
from src.route_profit.application.cli import build_parser, format_route_report, format_results, main
from src.route_profit.schemas.route import RouteScore


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep main() from attaching handlers to the root logger."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)


@pytest.fixture
def state_file(tmp_path: Path) -> str:
    return str(tmp_path / "bot_state.json")


@pytest.fixture
def routes() -> List[RouteScore]:
    return [
        RouteScore(1, "IST", "Istanbul", 2, "DIY", "Diyarbakir", 12345, "Airbus A320"),
        RouteScore(1, "IST", "Istanbul", 3, "ESB", "Ankara", -250, "ATR 72"),
    ]


def _run(state_file: str, *args: str) -> int:
    return main(["--state", state_file, *args])


# =============================================================================
# FORMATTING
# =============================================================================


class TestFormatting:
    def test_route_report(self, routes: List[RouteScore]):
        report = format_route_report("IST", routes)

        assert report.splitlines() == [
            "Top 2 Profitable Routes from IST",
            "`IST (Istanbul) - DIY (Diyarbakir)` - $12,345 (Airbus A320)",
            "`IST (Istanbul) - ESB (Ankara)` - $-250 (ATR 72)",
        ]

    def test_empty_report(self):
        report = format_route_report("IST", [])

        assert "No profitable routes found matching your criteria." in report

    def test_results_keep_base_order(self, routes: List[RouteScore]):
        text = format_results({"SAW": [], "IST": routes})

        assert text.index("from SAW") < text.index("from IST")


class TestParser:
    def test_run_arguments(self):
        args = build_parser().parse_args(["-v", "run", "main", "--cap", "200", "--csv", "out.csv"])

        assert args.command == "run"
        assert args.account == "main"
        assert args.cap == 200
        assert args.csv == "out.csv"
        assert args.verbose is True

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])


# =============================================================================
# STATE COMMANDS
# =============================================================================


class TestStateCommands:
    def test_account_and_plane_lifecycle(self, state_file: str, capsys):
        assert _run(state_file, "accounts", "add", "main", "--username", "pilot", "--password", "x") == 0
        assert _run(state_file, "planes", "add", "main", "Airbus A320") == 0
        assert _run(state_file, "planes", "add", "main", "42") == 0
        capsys.readouterr()

        assert _run(state_file, "planes", "list", "main") == 0
        out = capsys.readouterr().out
        assert '- "airbus a320"' in out
        assert "- ID: 42" in out

        assert _run(state_file, "planes", "remove", "main", "42") == 0
        assert _run(state_file, "accounts", "list") == 0
        assert "main" in capsys.readouterr().out

    def test_duplicate_plane_is_an_error(self, state_file: str, capsys):
        _run(state_file, "accounts", "add", "main", "--username", "pilot", "--password", "x")
        _run(state_file, "planes", "add", "main", "a320")

        assert _run(state_file, "planes", "add", "main", "A320") == 1
        assert "already" in capsys.readouterr().err

    def test_unknown_account_is_an_error(self, state_file: str, capsys):
        assert _run(state_file, "planes", "list", "ghost") == 1
        assert "ghost" in capsys.readouterr().err

    def test_run_refuses_empty_baselist(self, state_file: str, capsys):
        _run(state_file, "accounts", "add", "main", "--username", "pilot", "--password", "x")
        _run(state_file, "planes", "add", "main", "a320")

        assert _run(state_file, "run", "main") == 1
        assert 'baselist for account "main" is empty' in capsys.readouterr().err

    def test_exclude_list_for_unknown_base(self, state_file: str, capsys):
        _run(state_file, "accounts", "add", "main", "--username", "pilot", "--password", "x")

        assert _run(state_file, "excludes", "list", "main", "IST") == 1
        assert 'Base "IST" not found' in capsys.readouterr().err
