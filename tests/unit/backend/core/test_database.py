"""Unit tests for engine options and the request session dependency."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from notekeep.backend.core import database
from notekeep.backend.core.config_schema import DatabaseSchema


def _db() -> DatabaseSchema:
    return DatabaseSchema(
        host="localhost",
        port=5432,
        name="notekeep",
        user="notekeep",
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        echo=False,
        echo_pool=False,
    )


def _factory(session):
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)


class TestEngineOptions:

    def test_postgres_gets_pool_sizing(self):
        options = database._engine_options(_db(), "postgresql")
        assert options["pool_size"] == 5
        assert options["pool_pre_ping"] is True

    def test_sqlite_skips_pool_sizing(self):
        assert database._engine_options(_db(), "sqlite") == {"echo": False, "echo_pool": False}


class TestGetDbSession:

    async def test_commits_when_request_succeeds(self):
        session = AsyncMock()
        with patch.object(database, "get_session_factory", return_value=_factory(session)):
            dependency = database.get_db_session()
            assert await anext(dependency) is session
            with pytest.raises(StopAsyncIteration):
                await anext(dependency)

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    async def test_rolls_back_and_reraises_on_error(self):
        session = AsyncMock()
        with patch.object(database, "get_session_factory", return_value=_factory(session)):
            dependency = database.get_db_session()
            await anext(dependency)
            with pytest.raises(ValueError):
                await dependency.athrow(ValueError("handler failed"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()


class TestDisposeEngine:

    async def test_disposes_and_forgets_engine(self):
        engine = AsyncMock()
        with patch.object(database, "_engine", engine), patch.object(database, "_session_factory", MagicMock()):
            await database.dispose_engine()
            assert database._engine is None
            assert database._session_factory is None
        engine.dispose.assert_awaited_once()
