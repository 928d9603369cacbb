"""Unit tests for the click CLI entry point."""

import sys
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def _quiet_logging():
    with patch.object(cli, "setup_logging"):
        yield


class TestInfo:

    def test_default_service_is_info(self, runner):
        result = runner.invoke(cli.main, [])

        assert result.exit_code == 0
        assert "Auth strategy: jwt" in result.output
        assert "Services (--service):" in result.output

    def test_rejects_unknown_service(self, runner):
        result = runner.invoke(cli.main, ["--service", "bogus"])
        assert result.exit_code != 0


class TestConfig:

    def test_prints_every_section(self, runner):
        result = runner.invoke(cli.main, ["--service", "config"])

        assert result.exit_code == 0
        for section in ("Application", "Database", "Security", "Storage", "Concurrency"):
            assert f"{section}:" in result.output


class TestServerActions:

    def test_status_when_not_running(self, runner):
        with patch.object(cli, "_find_process_on_port", return_value=[]):
            result = runner.invoke(cli.main, ["--service", "server", "--action", "status", "--port", "9999"])

        assert result.exit_code == 0
        assert "not running on port 9999" in result.output

    def test_stop_signals_listeners(self, runner):
        with (
            patch.object(cli, "_find_process_on_port", return_value=[4242]),
            patch.object(cli.os, "kill") as mock_kill,
        ):
            result = runner.invoke(cli.main, ["--service", "server", "--action", "stop", "--port", "9999"])

        assert result.exit_code == 0
        mock_kill.assert_called_once_with(4242, cli.signal.SIGINT)

    def test_restart_stops_then_starts(self, runner):
        with (
            patch.object(cli, "_find_process_on_port", return_value=[]),
            patch.object(cli.time, "sleep"),
            patch.object(cli, "run_server") as mock_run,
        ):
            result = runner.invoke(cli.main, ["--service", "server", "--action", "restart", "--port", "9999"])

        assert result.exit_code == 0
        mock_run.assert_called_once()


class TestHealth:

    def _checks(self, *results):
        def make(outcome):
            def check():
                if isinstance(outcome, Exception):
                    raise outcome
                return outcome
            return check
        return [(f"check {i}", make(outcome)) for i, outcome in enumerate(results)]

    def test_all_passing_exits_zero(self, runner):
        with patch.object(cli, "HEALTH_CHECKS", self._checks("ok", None)):
            result = runner.invoke(cli.main, ["--service", "health"])

        assert result.exit_code == 0
        assert "check 0 (ok)" in result.output
        assert "All checks passed." in result.output

    def test_failing_check_reported_and_exits_nonzero(self, runner):
        with patch.object(cli, "HEALTH_CHECKS", self._checks("ok", RuntimeError("server down"))):
            result = runner.invoke(cli.main, ["--service", "health"])

        assert result.exit_code == 1
        assert "check 1 (server down)" in result.output


class TestBuildAlembicCommand:

    def test_upgrade(self):
        cmd = cli.build_alembic_command("upgrade", "head", None)
        assert cmd[:5] == [sys.executable, "-m", "alembic", "-c", str(cli.ALEMBIC_INI)]
        assert cmd[5:] == ["upgrade", "head"]

    def test_downgrade_to_revision(self):
        assert cli.build_alembic_command("downgrade", "-1", None)[5:] == ["downgrade", "-1"]

    def test_history(self):
        assert cli.build_alembic_command("history", "head", None)[5:] == ["history", "--verbose"]

    def test_autogenerate_needs_message(self):
        with pytest.raises(click.UsageError):
            cli.build_alembic_command("autogenerate", "head", None)

    def test_autogenerate(self):
        cmd = cli.build_alembic_command("autogenerate", "head", "add labels")
        assert cmd[5:] == ["revision", "--autogenerate", "-m", "add labels"]

    def test_alembic_ini_ships_with_package(self):
        assert cli.ALEMBIC_INI.exists()
