"""
Token Verification.

Turns a bearer token into a caller identity. Exactly one strategy is active
per process, chosen from security.yaml `auth.strategy`:

    jwt       - locally signed access tokens; the subject is an account id
    external  - tokens checked by an external identity service; the subject
                is the account's external_id

The verifier never touches the database. Resolving the identity to an
account happens in core/dependencies.py.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from uuid import UUID

import httpx

from notekeep.backend.core.exceptions import AuthenticationError, ExternalServiceError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.security import ACCESS_TOKEN_TYPE, decode_token

logger = get_logger(__name__)

ACCOUNT_SUBJECT = "account"
EXTERNAL_SUBJECT = "external"

# Statuses from the identity service that mean "this token is not valid",
# as opposed to "the service is broken"
_REJECTED_STATUSES = frozenset({400, 401, 403})


@dataclass(frozen=True)
class Identity:
    """Verified caller identity."""

    subject: str
    kind: str


class TokenVerifier(ABC):
    """Contract for bearer token verification strategies."""

    @property
    @abstractmethod
    def strategy(self) -> str:
        """Strategy name as written in security.yaml."""

    @abstractmethod
    async def verify(self, token: str) -> Identity:
        """
        Verify a token and return the caller identity.

        Raises:
            AuthenticationError: Token is invalid, expired or rejected
            ExternalServiceError: Verification could not be performed
        """

    async def aclose(self) -> None:
        """Release resources held by the verifier."""


class JwtTokenVerifier(TokenVerifier):
    """Verifies HS256 access tokens issued by POST /auth/login."""

    @property
    def strategy(self) -> str:
        return "jwt"

    async def verify(self, token: str) -> Identity:
        payload = decode_token(token, expected_type=ACCESS_TOKEN_TYPE)
        subject = str(payload["sub"])
        try:
            UUID(subject)
        except ValueError:
            logger.warning("Token subject is not an account id", extra={"subject": subject})
            raise AuthenticationError("Invalid or expired token")
        return Identity(subject=subject, kind=ACCOUNT_SUBJECT)


class ExternalTokenVerifier(TokenVerifier):
    """
    Verifies tokens against an external identity service.

    The service receives `{"token": ...}` and answers 2xx with a JSON body
    carrying the user reference in `sub`. 400/401/403 mean the token is bad;
    any other failure is reported as an upstream error.
    """

    def __init__(
        self,
        verify_url: str,
        api_key: str = "",
        timeout: float = 5.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.verify_url = verify_url
        self._headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def strategy(self) -> str:
        return "external"

    async def verify(self, token: str) -> Identity:
        try:
            response = await self._client.post(
                self.verify_url,
                json={"token": token},
                headers=self._headers,
            )
        except httpx.HTTPError as e:
            logger.error(
                "Identity service unreachable",
                extra={"url": self.verify_url, "error": str(e)},
            )
            raise ExternalServiceError("Identity service unavailable") from e

        if response.status_code in _REJECTED_STATUSES:
            logger.warning(
                "Identity service rejected token",
                extra={"status_code": response.status_code},
            )
            raise AuthenticationError("Invalid or expired token")

        if response.is_error:
            logger.error(
                "Identity service error",
                extra={"status_code": response.status_code},
            )
            raise ExternalServiceError("Identity service unavailable")

        try:
            body = response.json()
        except ValueError as e:
            raise ExternalServiceError("Identity service returned invalid JSON") from e

        subject = body.get("sub") if isinstance(body, dict) else None
        if not subject:
            raise AuthenticationError("Token has no subject")

        return Identity(subject=str(subject), kind=EXTERNAL_SUBJECT)

    async def aclose(self) -> None:
        if not self._client.is_closed:
            await self._client.aclose()


def build_token_verifier(app_config=None, settings=None) -> TokenVerifier:
    """Create the verifier selected by security.yaml."""
    if app_config is None or settings is None:
        from notekeep.backend.core.config import get_app_config, get_settings

        app_config = app_config or get_app_config()
        settings = settings or get_settings()

    auth_config = app_config.security.auth
    if auth_config.strategy == "external":
        external = auth_config.external
        verifier: TokenVerifier = ExternalTokenVerifier(
            verify_url=external.verify_url,
            api_key=settings.identity_api_key,
            timeout=external.timeout_seconds,
        )
    else:
        verifier = JwtTokenVerifier()

    logger.info("Token verifier configured", extra={"strategy": verifier.strategy})
    return verifier
