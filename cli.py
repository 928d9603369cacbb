#!/usr/bin/env python3
"""
Notekeep CLI.

    python cli.py                                   # overview
    python cli.py -s server --reload -v
    python cli.py -s server -a status
    python cli.py -s health
    python cli.py -s config
    python cli.py -s test --test-type unit --coverage
    python cli.py -s migrate --migrate-action autogenerate -m "add labels"
"""

import os
import signal
import subprocess
import sys
import time
from pathlib import Path
from typing import Callable

import click
import httpx
import structlog

from notekeep.backend.core.config import validate_project_root
from notekeep.backend.core.logging import get_logger, log_with_source, setup_logging

PROJECT_ROOT = Path(__file__).parent
ALEMBIC_INI = PROJECT_ROOT / "notekeep" / "backend" / "migrations" / "alembic.ini"

SERVICE_HELP = {
    "server": "API server (uvicorn)",
    "health": "Check configuration and the running server",
    "config": "Print the loaded settings files",
    "test": "Run the pytest suite",
    "migrate": "Alembic migrations",
    "info": "This overview",
}
ACTION_HELP = {
    "start": "Start the server (default)",
    "stop": "SIGINT whatever listens on the port",
    "restart": "Stop, wait, start",
    "status": "Report whether the port is taken",
}
CONFIG_SECTIONS = ("application", "database", "logging", "features", "security", "storage", "concurrency")

# --migrate-action -> alembic arguments; autogenerate is built separately
ALEMBIC_ARGS = {
    "upgrade": lambda revision: ["upgrade", revision],
    "downgrade": lambda revision: ["downgrade", revision],
    "current": lambda revision: ["current"],
    "history": lambda revision: ["history", "--verbose"],
}

# seconds between stop and start on restart
RESTART_PAUSE = 2


def _fail(message: str, code: int = 1) -> None:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)


def _load_app_config(logger):
    from notekeep.backend.core.config import get_app_config

    try:
        return get_app_config()
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        _fail(f"could not load config/settings: {e}")


# -----------------------------------------------------------------------------
# server
# -----------------------------------------------------------------------------


def _find_process_on_port(port: int) -> list[int]:
    result = subprocess.run(["lsof", "-ti", f":{port}"], capture_output=True, text=True)
    return [int(pid) for pid in result.stdout.split() if pid.strip()]


def _pid_list(pids: list[int]) -> str:
    return ", ".join(str(pid) for pid in pids)


def _server_stop(logger, port: int) -> None:
    pids = _find_process_on_port(port)
    if not pids:
        click.echo(f"No server running on port {port}.")
        return
    for pid in pids:
        os.kill(pid, signal.SIGINT)
        logger.info("Sent SIGINT", extra={"pid": pid, "port": port})
    click.echo(f"Server on port {port} stopped (PID: {_pid_list(pids)}).")


def _server_status(port: int) -> None:
    pids = _find_process_on_port(port)
    if pids:
        click.echo(f"Server is running on port {port} (PID: {_pid_list(pids)}).")
    else:
        click.echo(f"Server is not running on port {port}.")


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    server = _load_app_config(logger).application.server
    bind_host, bind_port = host or server.host, port or server.port

    cmd = [
        sys.executable, "-m", "uvicorn", "notekeep.backend.main:app",
        "--host", bind_host,
        "--port", str(bind_port),
    ]
    if reload:
        cmd.append("--reload")

    logger.info("Starting server", extra={"host": bind_host, "port": bind_port, "reload": reload})
    click.echo(f"Starting server at http://{bind_host}:{bind_port} (Ctrl+C to stop)\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server exited with an error", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


# -----------------------------------------------------------------------------
# health
# -----------------------------------------------------------------------------


def _check_yaml() -> str:
    from notekeep.backend.core.config import get_app_config
    return f"App: {get_app_config().application.name}"


def _check_secrets() -> None:
    from notekeep.backend.core.config import get_settings
    get_settings()


def _check_startup() -> None:
    from notekeep.backend.core.startup_checks import run_startup_checks
    run_startup_checks()


def _check_app() -> str:
    from notekeep.backend.main import get_app
    return f"Routes: {len(get_app().routes)}"


def _check_running_server() -> str:
    from notekeep.backend.core.config import get_server_base_url

    base_url, timeout = get_server_base_url()
    try:
        response = httpx.get(f"{base_url}/health", timeout=timeout)
    except httpx.HTTPError as e:
        raise RuntimeError(f"{base_url} unreachable: {e}") from e
    if response.status_code != 200:
        raise RuntimeError(f"{base_url} returned {response.status_code}")
    return base_url


# Each check returns an optional detail string or raises with the reason
HEALTH_CHECKS: list[tuple[str, Callable[[], str | None]]] = [
    ("YAML configuration", _check_yaml),
    ("Secrets (config/.env)", _check_secrets),
    ("Startup security checks", _check_startup),
    ("FastAPI application", _check_app),
    ("Running server", _check_running_server),
]


def check_health(logger) -> bool:
    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, check in HEALTH_CHECKS:
        try:
            detail, passed = check(), True
        except Exception as e:
            detail, passed = str(e), False
            logger.warning("Health check failed", extra={"check": name, "error": detail})
        all_passed = all_passed and passed
        mark = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        click.echo(f"  {mark}  {name}" + (f" ({detail})" if detail else ""))

    click.echo("-" * 50)
    if all_passed:
        click.echo(click.style("All checks passed.", fg="green"))
    else:
        click.echo(click.style("Some checks failed.", fg="yellow"))
    return all_passed


# -----------------------------------------------------------------------------
# config / info
# -----------------------------------------------------------------------------


def _echo_mapping(values: dict, indent: int = 2) -> None:
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_mapping(value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Print every settings file. Secrets live in config/.env and are never shown."""
    app_config = _load_app_config(logger)
    for section in CONFIG_SECTIONS:
        click.echo(f"\n{section.title()}:")
        click.echo("-" * 40)
        _echo_mapping(getattr(app_config, section).model_dump())


def show_info(logger) -> None:
    app_config = _load_app_config(logger)
    app = app_config.application

    click.echo(f"{app.name} {app.version} ({app.environment})")
    click.echo("=" * 40)
    click.echo(app.description)
    click.echo(f"Auth strategy: {app_config.security.auth.strategy}")
    click.echo(f"Storage backend: {app_config.storage.backend}")
    click.echo("\nServices (--service):")
    for name, text in SERVICE_HELP.items():
        click.echo(f"  {name:<14} {text}")
    click.echo("\nServer actions (--action):")
    for name, text in ACTION_HELP.items():
        click.echo(f"  {name:<14} {text}")


# -----------------------------------------------------------------------------
# test / migrate
# -----------------------------------------------------------------------------


def run_tests(logger, test_type: str, coverage: bool) -> None:
    cmd = [sys.executable, "-m", "pytest", "tests/" if test_type == "all" else f"tests/{test_type}", "-v"]
    if coverage:
        cmd += ["--cov=notekeep", "--cov-report=term-missing"]

    logger.info("Running tests", extra={"type": test_type, "coverage": coverage})
    click.echo(f"Running: {' '.join(cmd)}\n")
    sys.exit(subprocess.run(cmd, cwd=PROJECT_ROOT).returncode)


def build_alembic_command(migrate_action: str, revision: str, message: str | None) -> list[str]:
    """
    Alembic argv for a --migrate-action.

    Raises:
        click.UsageError: autogenerate without -m
    """
    if migrate_action == "autogenerate":
        if not message:
            raise click.UsageError("--message/-m required for autogenerate.")
        args = ["revision", "--autogenerate", "-m", message]
    else:
        args = ALEMBIC_ARGS[migrate_action](revision)
    return [sys.executable, "-m", "alembic", "-c", str(ALEMBIC_INI), *args]


def run_migrations(logger, migrate_action: str, revision: str, message: str | None) -> None:
    if not ALEMBIC_INI.exists():
        _fail(f"{ALEMBIC_INI.relative_to(PROJECT_ROOT)} not found.")

    cmd = build_alembic_command(migrate_action, revision, message)
    logger.info("Running migrations", extra={"action": migrate_action, "revision": revision})
    click.echo(f"Running: alembic {' '.join(cmd[5:])}\n")

    result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    log_with_source(logger, "cli", "info", "Migration completed", action=migrate_action)


# -----------------------------------------------------------------------------
# entry point
# -----------------------------------------------------------------------------


@click.command()
@click.option("--service", "-s", type=click.Choice(list(SERVICE_HELP)), default="info", help="What to run.")
@click.option(
    "--action", "-a",
    type=click.Choice(list(ACTION_HELP)),
    default="start",
    help="Server lifecycle action.",
)
@click.option("--verbose", "-v", is_flag=True, help="INFO level logging.")
@click.option("--debug", "-d", is_flag=True, help="DEBUG level logging.")
@click.option("--host", default=None, help="Server host (default from application.yaml).")
@click.option("--port", default=None, type=int, help="Server port (default from application.yaml).")
@click.option("--reload", is_flag=True, help="Auto-reload on code changes.")
@click.option("--test-type", type=click.Choice(["all", "unit", "integration"]), default="all")
@click.option("--coverage", is_flag=True, help="Collect coverage for the notekeep package.")
@click.option(
    "--migrate-action",
    type=click.Choice([*ALEMBIC_ARGS, "autogenerate"]),
    default="current",
)
@click.option("--revision", default="head", help="Target for upgrade/downgrade.")
@click.option("-m", "--message", default=None, help="Revision message for autogenerate.")
def main(
    service: str,
    action: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    test_type: str,
    coverage: bool,
    migrate_action: str,
    revision: str,
    message: str | None,
) -> None:
    """Notekeep operations: run the server, check health, migrate, test."""
    validate_project_root()

    log_level = "DEBUG" if debug else "INFO" if verbose else "WARNING"
    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(source="cli")
    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "action": action})

    if service == "server" and action != "start":
        server_port = port or _load_app_config(logger).application.server.port
        if action == "status":
            _server_status(server_port)
            return
        _server_stop(logger, server_port)
        if action == "stop":
            return
        time.sleep(RESTART_PAUSE)

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "health":
        if not check_health(logger):
            sys.exit(1)
    elif service == "config":
        show_config(logger)
    elif service == "test":
        run_tests(logger, test_type, coverage)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision, message)
    else:
        show_info(logger)


if __name__ == "__main__":
    main()
