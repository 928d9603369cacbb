"""
FastAPI Dependencies.

Shared dependencies for request handling.

Authentication runs in two steps so a request with a missing or malformed
Authorization header is rejected before a database session is opened:

    get_identity         header -> verified Identity (no database)
    get_current_account  Identity -> live Account (one query)
"""

import uuid
from typing import Annotated

import structlog
from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.config import get_app_config
from notekeep.backend.core.database import get_db_session
from notekeep.backend.core.exceptions import (
    AuthenticationError,
    MalformedCredentialError,
    MissingCredentialError,
)
from notekeep.backend.core.identity import ACCOUNT_SUBJECT, Identity, TokenVerifier
from notekeep.backend.core.logging import get_logger
from notekeep.backend.models.account import Account
from notekeep.backend.repositories.account import AccountRepository
from notekeep.backend.services.file import FileService
from notekeep.backend.storage import BlobStore, get_blob_store

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]


async def get_request_id(request: Request) -> str:
    """
    Request ID assigned by RequestContextMiddleware.

    Falls back to the X-Request-ID header, then a fresh UUID, when the
    middleware is not installed.
    """
    request_id = getattr(request.state, "request_id", None)
    return request_id or request.headers.get("x-request-id") or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


def extract_bearer_token(authorization: str | None) -> str:
    """
    Pull the token out of an Authorization header value.

    Raises:
        MissingCredentialError: Header absent or blank
        MalformedCredentialError: Not exactly `Bearer <token>`
    """
    if authorization is None or not authorization.strip():
        raise MissingCredentialError()

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise MalformedCredentialError()

    return parts[1]


def get_token_verifier(request: Request) -> TokenVerifier:
    """The verifier chosen at application startup."""
    return request.app.state.token_verifier


async def get_identity(
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
    authorization: Annotated[str | None, Header()] = None,
) -> Identity:
    """Verify the bearer token and return the caller's identity."""
    token = extract_bearer_token(authorization)
    return await verifier.verify(token)


async def get_current_account(
    identity: Annotated[Identity, Depends(get_identity)],
    db: DbSession,
) -> Account:
    """
    Resolve the verified identity to a live account.

    Raises:
        AuthenticationError: No live account matches the identity
    """
    repo = AccountRepository(db)
    if identity.kind == ACCOUNT_SUBJECT:
        account = await repo.get_by_id_or_none(identity.subject)
    else:
        account = await repo.get_by_external_id(identity.subject)

    if account is None:
        logger.warning(
            "Token subject has no live account",
            extra={"subject_kind": identity.kind},
        )
        raise AuthenticationError("Account not found or deleted")

    structlog.contextvars.bind_contextvars(account_id=account.id)
    return account


CurrentAccount = Annotated[Account, Depends(get_current_account)]
BlobStoreDep = Annotated[BlobStore, Depends(get_blob_store)]


def get_file_service(store: BlobStoreDep) -> FileService:
    """FileService over the running blob store, capped by storage.max_upload_bytes."""
    return FileService(store, max_upload_bytes=get_app_config().storage.max_upload_bytes)


FileServiceDep = Annotated[FileService, Depends(get_file_service)]
