"""Unit test fixtures: in-memory accounts and mocked collaborators, no database."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from notekeep.backend.models.account import Account


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """AsyncSession stand-in; `add` is the only synchronous method repositories call."""
    session = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def caller() -> Account:
    """Transient account acting as the authenticated caller."""
    return Account(
        id="11111111-1111-1111-1111-111111111111",
        first_name="Ada",
        last_name="Lovelace",
        email="ada@example.com",
    )


@pytest.fixture
def other_account() -> Account:
    return Account(
        id="22222222-2222-2222-2222-222222222222",
        first_name="Grace",
        last_name="Hopper",
        email="grace@example.com",
    )


@pytest.fixture
def mock_settings() -> SimpleNamespace:
    """Secrets as get_settings() would return them."""
    return SimpleNamespace(
        db_password="test_pass",
        jwt_secret="test-secret-key-that-is-long-enough-for-testing-purposes",
        azure_storage_key="",
        identity_api_key="",
        database_url="",
    )
