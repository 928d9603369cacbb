"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the real app.
These fixtures build on the root conftest.py database fixtures.

httpx's ASGITransport does not run the application lifespan, so the blob
store that startup would create is replaced by an in-memory one.
"""

from collections.abc import AsyncGenerator
from typing import Any, BinaryIO

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.database import get_db_session
from notekeep.backend.core.exceptions import NotFoundError
from notekeep.backend.core.security import create_access_token, hash_password
from notekeep.backend.core.utils import owner_prefix
from notekeep.backend.models.account import Account
from notekeep.backend.storage import get_blob_store
from notekeep.backend.storage.base import BlobStore, StoredBlob

PASSWORD = "correct-horse"


# =============================================================================
# Blob Store Fake
# =============================================================================


class InMemoryBlobStore(BlobStore):
    """Blob store keeping file contents in a dict keyed by blob name."""

    def __init__(self) -> None:
        self.blobs: dict[str, bytes] = {}

    @property
    def backend_name(self) -> str:
        return "memory"

    async def ensure_ready(self) -> None:
        return None

    async def upload_file(
        self,
        owner_id: str,
        filename: str,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> StoredBlob:
        name = self.blob_name(owner_id, filename)
        self.blobs[name] = data.read()
        return StoredBlob(
            filename=filename,
            url=f"memory://{name}",
            content_type=content_type,
        )

    async def list_files(self, owner_id: str) -> list[str]:
        prefix = owner_prefix(owner_id)
        return sorted(name.removeprefix(prefix) for name in self.blobs if name.startswith(prefix))

    async def delete_file(self, owner_id: str, filename: str) -> None:
        name = self.blob_name(owner_id, filename)
        if name not in self.blobs:
            raise NotFoundError("File not found")
        del self.blobs[name]


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


# =============================================================================
# App Client
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
    blob_store: InMemoryBlobStore,
) -> AsyncGenerator[AsyncClient, None]:
    """Real app over ASGI; requests share `db_session` and `blob_store` with the test body."""

    async def shared_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    from notekeep.backend.main import create_app

    app = create_app()
    app.state.blob_store = blob_store
    app.dependency_overrides.update({
        get_db_session: shared_session,
        get_blob_store: lambda: blob_store,
    })

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


# =============================================================================
# Account Fixtures
# =============================================================================


async def _insert_account(
    db_session: AsyncSession,
    first_name: str,
    email: str,
    password: str | None = PASSWORD,
    external_id: str | None = None,
) -> Account:
    """Insert a live account directly, bypassing the API."""
    account = Account(
        first_name=first_name,
        last_name="Test",
        email=email,
        external_id=external_id,
        password_hash=hash_password(password) if password else None,
    )
    db_session.add(account)
    await db_session.flush()
    return account


def _bearer(account: Account) -> dict[str, str]:
    """Authorization header carrying a fresh access token for the account."""
    token = create_access_token({"sub": account.id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def owner(db_session: AsyncSession) -> Account:
    return await _insert_account(db_session, "Ada", "ada@example.com")


@pytest.fixture
async def stranger(db_session: AsyncSession) -> Account:
    return await _insert_account(db_session, "Grace", "grace@example.com")


@pytest.fixture
def auth_headers(owner: Account) -> dict[str, str]:
    """
    Provide authentication headers for API requests as `owner`.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/v1/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    return _bearer(owner)


@pytest.fixture
def stranger_headers(stranger: Account) -> dict[str, str]:
    return _bearer(stranger)


@pytest.fixture
def make_account(db_session: AsyncSession):
    """
    Factory inserting extra accounts.

    Usage:
        async def test_x(make_account):
            account = await make_account("Linus", "linus@example.com", password=None, external_id="ext-1")
    """

    async def _make(first_name: str, email: str, **kwargs: Any) -> Account:
        return await _insert_account(db_session, first_name, email, **kwargs)

    return _make


@pytest.fixture
def headers_for():
    """Build bearer headers for any account."""
    return _bearer


# =============================================================================
# Envelope Assertions
# =============================================================================


class ApiAssertions:
    """Checks on the {success, data, error, metadata} envelope; each returns the parsed body."""

    @staticmethod
    def _body(response: Any, expected_status: int) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"{response.request.method} {response.request.url.path}: "
            f"expected {expected_status}, got {response.status_code}: {response.text}"
        )
        return response.json()

    def assert_success(self, response: Any, expected_status: int = 200) -> dict[str, Any]:
        body = self._body(response, expected_status)
        assert body.get("success") is True, body
        assert body.get("error") is None, body
        return body

    def assert_error(
        self,
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        body = self._body(response, expected_status)
        assert body.get("success") is False, body
        assert body.get("data") is None, body
        assert body.get("error"), body
        if expected_code is not None:
            assert body["error"]["code"] == expected_code, body["error"]
        return body

    def assert_validation_error(self, response: Any, field: str | None = None) -> dict[str, Any]:
        """400 VAL_REQUEST_INVALID, optionally naming `field` somewhere in an issue's location."""
        body = self.assert_error(response, 400, "VAL_REQUEST_INVALID")
        if field is not None:
            locations = [issue["field"] for issue in body["error"]["details"]["validation_errors"]]
            assert any(field in location for location in locations), locations
        return body


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()
