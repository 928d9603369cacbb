"""
Configuration Schemas.

One model per file in config/settings/, checked when AppConfig loads:

    ApplicationSchema  application.yaml
    DatabaseSchema     database.yaml
    LoggingSchema      logging.yaml
    FeaturesSchema     features.yaml
    SecuritySchema     security.yaml
    StorageSchema      storage.yaml
    ConcurrencySchema  concurrency.yaml

Unknown keys are rejected, and values with a closed set of meanings
(environment, auth strategy, storage backend) are Literals so a typo fails
at startup.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str]


class TimeoutsSchema(_StrictBase):
    """Seconds."""

    database: int = Field(gt=0)
    external_api: int = Field(gt=0)


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: Literal["development", "test", "staging", "production"]
    debug: bool
    api_prefix: str
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    timeouts: TimeoutsSchema

    @field_validator("api_prefix")
    @classmethod
    def prefix_is_absolute(cls, v: str) -> str:
        if not v.startswith("/") or v.endswith("/"):
            raise ValueError("api_prefix must start with '/' and not end with '/'")
        return v


# =============================================================================
# database.yaml
# =============================================================================


class DatabaseSchema(_StrictBase):
    # Full SQLAlchemy URL; when set the connection fields below are ignored
    url: str | None = None
    host: str
    port: int = Field(ge=1, le=65535)
    name: str
    user: str
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: int = Field(gt=0)
    pool_recycle: int
    echo: bool
    echo_pool: bool


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema
    # Event keys whose values are masked before rendering (matched case-insensitively)
    redact_fields: list[str]
    # Third-party loggers held at WARNING whatever the root level is
    quiet_loggers: list[str]


# =============================================================================
# features.yaml
# =============================================================================


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool
    api_request_logging: bool
    security_startup_checks_enabled: bool
    security_cors_enforce_production: bool
    files_enabled: bool


# =============================================================================
# security.yaml
# =============================================================================


class JwtSchema(_StrictBase):
    algorithm: Literal["HS256", "HS384", "HS512"]
    access_token_expire_minutes: int = Field(gt=0)
    refresh_token_expire_days: int = Field(gt=0)
    audience: str


class ExternalIdentitySchema(_StrictBase):
    verify_url: str
    timeout_seconds: float = Field(gt=0)


class AuthSchema(_StrictBase):
    strategy: Literal["jwt", "external"]
    external: ExternalIdentitySchema


class SecretsValidationSchema(_StrictBase):
    jwt_secret_min_length: int = Field(ge=16)


class CorsEnforcementSchema(_StrictBase):
    enforce_in_production: bool
    allow_methods: list[str]
    allow_headers: list[str]


class SecuritySchema(_StrictBase):
    jwt: JwtSchema
    auth: AuthSchema
    secrets_validation: SecretsValidationSchema
    cors: CorsEnforcementSchema


# =============================================================================
# storage.yaml
# =============================================================================


class AzureStorageSchema(_StrictBase):
    model_config = ConfigDict(extra="forbid", regex_engine="python-re")

    account_name: str
    # Azure container names: 3-63 chars, lowercase letters, digits and hyphens
    container: str = Field(min_length=3, max_length=63, pattern=r"^[a-z0-9](?:[a-z0-9]|-(?!-))*[a-z0-9]$")


class LocalStorageSchema(_StrictBase):
    path: str
    base_url: str

    @field_validator("base_url")
    @classmethod
    def base_url_is_http(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")


class StorageSchema(_StrictBase):
    backend: Literal["azure", "local"]
    max_upload_bytes: int = Field(gt=0)
    azure: AzureStorageSchema
    local: LocalStorageSchema


# =============================================================================
# concurrency.yaml
# =============================================================================


class ThreadPoolSchema(_StrictBase):
    max_workers: int = Field(ge=1)


class ShutdownSchema(_StrictBase):
    drain_seconds: int = Field(ge=0)


class ConcurrencySchema(_StrictBase):
    thread_pool: ThreadPoolSchema
    shutdown: ShutdownSchema
