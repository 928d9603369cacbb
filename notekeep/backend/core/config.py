"""
Configuration Management.

Two sources, nothing hardcoded:

    config/.env              secrets (DB_PASSWORD, JWT_SECRET, AZURE_STORAGE_KEY,
                             IDENTITY_API_KEY, optional DATABASE_URL)
    config/settings/*.yaml   everything else, one file per AppConfig section

Both are located through the `.project_root` marker so the CLI, Alembic and
the test suite resolve the same files regardless of working directory.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

from notekeep.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    SecuritySchema,
    StorageSchema,
)

PROJECT_MARKER = ".project_root"

# AppConfig attribute -> (schema, file under config/settings/)
SECTION_FILES: dict[str, tuple[type[BaseModel], str]] = {
    "application": (ApplicationSchema, "application.yaml"),
    "database": (DatabaseSchema, "database.yaml"),
    "logging": (LoggingSchema, "logging.yaml"),
    "features": (FeaturesSchema, "features.yaml"),
    "security": (SecuritySchema, "security.yaml"),
    "storage": (StorageSchema, "storage.yaml"),
    "concurrency": (ConcurrencySchema, "concurrency.yaml"),
}


def find_project_root() -> Path:
    """Walk up from the working directory to the directory holding .project_root."""
    current = Path.cwd()
    while current != current.parent:
        if (current / PROJECT_MARKER).exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """find_project_root for entry scripts: exits with a readable message instead of raising."""
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    config_path = find_project_root() / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets loaded from config/.env or the process environment."""

    db_password: str
    jwt_secret: str
    azure_storage_key: str = ""
    identity_api_key: str = ""
    # Full connection string from a hosting platform; wins over database.yaml
    database_url: str = ""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type[BaseModel], filename: str) -> Any:
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    Every settings file, validated at load time.

    A missing key, wrong type or unknown field in any file fails here with the
    file name in the message rather than as an AttributeError mid-request.
    """

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    security: SecuritySchema
    storage: StorageSchema
    concurrency: ConcurrencySchema

    def __init__(self) -> None:
        for attr, (schema_cls, filename) in SECTION_FILES.items():
            setattr(self, attr, _load_validated(schema_cls, filename))


@lru_cache
def get_settings() -> Settings:
    env_path = find_project_root() / "config" / ".env"
    return Settings(_env_file=str(env_path))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def _with_driver(url: str, async_driver: bool) -> str:
    """Normalise postgres:// style URLs to the driver this process uses."""
    parsed = make_url(url)
    if parsed.get_backend_name() not in ("postgres", "postgresql"):
        return url
    driver = "postgresql+asyncpg" if async_driver else "postgresql"
    return parsed.set(drivername=driver).render_as_string(hide_password=False)


def get_database_url(async_driver: bool = True) -> str:
    """
    Resolve the database connection URL.

    Precedence: DATABASE_URL secret, then `url` in database.yaml (used to
    point a local run at SQLite), then the host/port/name fields with
    DB_PASSWORD.

    Args:
        async_driver: asyncpg for the application, plain psycopg for tooling.
    """
    settings = get_settings()
    if settings.database_url:
        return _with_driver(settings.database_url, async_driver)

    db = get_app_config().database
    if db.url:
        return db.url

    return URL.create(
        drivername="postgresql+asyncpg" if async_driver else "postgresql",
        username=db.user,
        password=settings.db_password,
        host=db.host,
        port=db.port,
        database=db.name,
    ).render_as_string(hide_password=False)


def get_server_base_url() -> tuple[str, float]:
    """Base URL of the local API server and the client timeout, for the CLI."""
    app = get_app_config().application
    server = app.server
    return f"http://{server.host}:{server.port}", float(app.timeouts.external_api)
