"""
Centralized Logging.

structlog on top of stdlib logging, configured from config/settings/logging.yaml.
Every module logs through get_logger(__name__):

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})

JSON records carry timestamp, level, logger, event, func_name and lineno,
plus request_id, source and account_id when RequestContextMiddleware and the
auth dependency have bound them. Values under the keys listed in
`redact_fields` are masked at any depth, so a password or bearer token passed
in `extra` never reaches a handler.

Outside a request (CLI, migrations, startup) set the source explicitly:

    log_with_source(logger, "cli", "info", "Migration finished", revision="head")

All records go to logs/system.jsonl; filter by `source`.
"""

import logging
import sys
from collections.abc import Iterable
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notekeep.backend.core.config import find_project_root, get_app_config
from notekeep.backend.core.config_schema import FileHandlerSchema, LoggingSchema

VALID_SOURCES = frozenset({
    "web",
    "cli",
    "mobile",
    "api",
    "internal",
    "unknown",
})
"""Values accepted in X-Frontend-ID and passed to log_with_source."""

REDACTED = "[redacted]"


class CredentialRedactor:
    """Structlog processor replacing credential values, including inside nested dicts."""

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = frozenset(field.lower() for field in fields)

    def _scrub(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                key: REDACTED if str(key).lower() in self.fields else self._scrub(item)
                for key, item in value.items()
            }
        return value

    def __call__(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        return self._scrub(event_dict)


def _get_logging_config() -> LoggingSchema:
    return get_app_config().logging


def _shared_processors(config: LoggingSchema) -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        CredentialRedactor(config.redact_fields),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(format_type: str, pre_chain: list[Processor]) -> logging.Formatter:
    renderer: Processor
    if format_type == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=pre_chain)


def _file_handler(file_config: FileHandlerSchema, pre_chain: list[Processor]) -> logging.Handler:
    # Relative to the project root so the CLI and the server share one file
    log_path = find_project_root() / file_config.path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=file_config.max_bytes,
        backupCount=file_config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter("json", pre_chain))
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structlog and the root logger.

    Arguments override the matching logging.yaml values. Safe to call more
    than once: existing root handlers are replaced, not duplicated.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        format_type: 'json' or 'console' for the console handler (the file is always JSON)
        enable_console: Write to stdout
        enable_file_logging: Write to the rotating JSONL file
    """
    config = _get_logging_config()
    pre_chain = _shared_processors(config)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []
    if config.handlers.console.enabled if enable_console is None else enable_console:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(_formatter(format_type or config.format, pre_chain))
        handlers.append(console)
    if config.handlers.file.enabled if enable_file_logging is None else enable_file_logging:
        handlers.append(_file_handler(config.handlers.file, pre_chain))

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or config.level).upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    for name in config.quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log with an explicit source, for code that runs outside a request.

    Raises:
        AttributeError: If level is not a valid log level
    """
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
