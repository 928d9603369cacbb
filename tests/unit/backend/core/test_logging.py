"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handler wiring and source handling.
"""

import logging
from logging.handlers import RotatingFileHandler
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from notekeep.backend.core import logging as logging_module
from notekeep.backend.core.config_schema import LoggingSchema
from notekeep.backend.core.logging import (
    REDACTED,
    VALID_SOURCES,
    CredentialRedactor,
    get_logger,
    log_with_source,
    setup_logging,
)


def _schema(file_enabled: bool = False, path: str = "logs/system.jsonl") -> LoggingSchema:
    return LoggingSchema(
        level="INFO",
        format="json",
        handlers={
            "console": {"enabled": True},
            "file": {
                "enabled": file_enabled,
                "path": path,
                "max_bytes": 1024,
                "backup_count": 1,
            },
        },
        redact_fields=["password", "Authorization"],
        quiet_loggers=["httpx", "sqlalchemy.engine"],
    )


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


class TestValidSources:

    def test_contains_expected_values(self):
        assert VALID_SOURCES == frozenset({"web", "cli", "mobile", "api", "internal", "unknown"})

    def test_is_frozenset(self):
        assert isinstance(VALID_SOURCES, frozenset)


class TestSetupLogging:

    def test_level_override_wins_over_config(self):
        with patch.object(logging_module, "_get_logging_config", return_value=_schema()):
            setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_console_only_when_file_disabled(self):
        with patch.object(logging_module, "_get_logging_config", return_value=_schema()):
            setup_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)

    def test_file_handler_written_under_project_root(self, tmp_path):
        with (
            patch.object(logging_module, "_get_logging_config", return_value=_schema(True, "logs/t.jsonl")),
            patch.object(logging_module, "find_project_root", return_value=tmp_path),
        ):
            setup_logging(enable_console=False)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert (tmp_path / "logs").is_dir()

    def test_repeated_setup_does_not_duplicate_handlers(self):
        with patch.object(logging_module, "_get_logging_config", return_value=_schema()):
            setup_logging()
            setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_quiets_noisy_libraries(self):
        with patch.object(logging_module, "_get_logging_config", return_value=_schema()):
            setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_redacts_credentials_in_written_records(self, tmp_path):
        with (
            patch.object(logging_module, "_get_logging_config", return_value=_schema(True, "logs/t.jsonl")),
            patch.object(logging_module, "find_project_root", return_value=tmp_path),
        ):
            setup_logging(enable_console=False)

        get_logger("notekeep.redaction").info("Sign in", extra={"email": "a@b.c", "password": "hunter2"})

        written = (tmp_path / "logs" / "t.jsonl").read_text()
        assert "hunter2" not in written
        assert REDACTED in written
        assert "a@b.c" in written


class TestCredentialRedactor:

    def test_masks_top_level_and_nested_keys(self):
        redact = CredentialRedactor(["password", "token"])
        event = {"event": "Login", "password": "s3cret", "extra": {"token": "abc", "user": "u1"}}

        result = redact(None, "info", event)

        assert result["password"] == REDACTED
        assert result["extra"] == {"token": REDACTED, "user": "u1"}
        assert result["event"] == "Login"

    def test_matches_keys_case_insensitively(self):
        redact = CredentialRedactor(["Authorization"])
        result = redact(None, "info", {"event": "x", "headers": {"authorization": "Bearer t"}})
        assert result["headers"]["authorization"] == REDACTED

    def test_leaves_non_dict_values_alone(self):
        redact = CredentialRedactor(["password"])
        event = {"event": "x", "items": ["password"], "count": 3}
        assert redact(None, "info", event) == event


class TestGetLogger:

    def test_returns_usable_logger(self):
        logger = get_logger("notekeep.test")
        assert hasattr(logger, "info")
        assert hasattr(logger, "warning")


class TestLogWithSource:

    def test_passes_source_and_context(self):
        logger = MagicMock()
        log_with_source(logger, "cli", "info", "Migration finished", revision="head")
        logger.info.assert_called_once_with("Migration finished", source="cli", revision="head")

    def test_invalid_level_raises(self):
        logger = SimpleNamespace()
        with pytest.raises(AttributeError):
            log_with_source(logger, "cli", "loud", "x")
