"""
Configuration checks run by the lifespan before the app accepts traffic.

Every check runs; the app refuses to start if any reported a problem, and the
error lists all of them so one deploy fixes everything at once.
"""

from collections.abc import Iterator
from typing import Any, Callable

from notekeep.backend.core.config import get_app_config, get_settings
from notekeep.backend.core.logging import get_logger

logger = get_logger(__name__)


class StartupSecurityError(RuntimeError):
    """Configuration is unsafe to serve with."""


def _secret_strength(app_config: Any, settings: Any) -> Iterator[str]:
    minimum = app_config.security.secrets_validation.jwt_secret_min_length
    if len(settings.jwt_secret) < minimum:
        yield f"JWT_SECRET is {len(settings.jwt_secret)} chars, minimum is {minimum}"


def _auth_strategy(app_config: Any, settings: Any) -> Iterator[str]:
    auth = app_config.security.auth
    if auth.strategy == "external" and not auth.external.verify_url:
        yield "auth.strategy is 'external' but auth.external.verify_url is empty"


def _azure_credentials(app_config: Any, settings: Any) -> Iterator[str]:
    if not app_config.features.files_enabled or app_config.storage.backend != "azure":
        return
    if not app_config.storage.azure.account_name:
        yield "storage backend is 'azure' but azure.account_name is empty"
    if not settings.azure_storage_key:
        yield "storage backend is 'azure' but AZURE_STORAGE_KEY is empty"


def _production_safety(app_config: Any, settings: Any) -> Iterator[str]:
    app = app_config.application
    if app.environment != "production":
        return
    if app.debug:
        yield "debug is true in production environment"
    if app_config.features.api_detailed_errors:
        yield "api_detailed_errors is true in production environment"
    if app.docs_enabled:
        yield "docs_enabled is true in production environment"
    if app_config.storage.backend == "local":
        yield "local blob storage is not allowed in production environment"

    enforce_cors = app_config.security.cors.enforce_in_production and app_config.features.security_cors_enforce_production
    localhost_origins = [origin for origin in app.cors.origins if "localhost" in origin]
    if enforce_cors and localhost_origins:
        yield f"CORS origins contain localhost in production: {localhost_origins}"


STARTUP_CHECKS: tuple[Callable[[Any, Any], Iterator[str]], ...] = (
    _secret_strength,
    _auth_strategy,
    _azure_credentials,
    _production_safety,
)


def run_startup_checks(app_config=None, settings=None) -> None:
    """
    Raises:
        StartupSecurityError: Listing every failed check
    """
    app_config = app_config or get_app_config()
    settings = settings or get_settings()

    problems = [problem for check in STARTUP_CHECKS for problem in check(app_config, settings)]
    for problem in problems:
        logger.error("Startup security check failed", extra={"check": problem})
    if problems:
        raise StartupSecurityError(
            f"Startup blocked: {len(problems)} security check(s) failed:\n"
            + "\n".join(f"  - {problem}" for problem in problems)
        )

    logger.info(
        "Startup security checks passed",
        extra={"environment": app_config.application.environment, "checks_run": len(STARTUP_CHECKS)},
    )
