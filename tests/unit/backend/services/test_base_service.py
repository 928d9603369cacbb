"""Unit tests for BaseService database error mapping."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from notekeep.backend.core.exceptions import ConflictError, DatabaseError
from notekeep.backend.services.base import BaseService


class LabelService(BaseService):
    unique_violations = {
        "uq_labels_name": "Label name already used",
        "labels.name": "Label name already used",
    }


@pytest.fixture
def service():
    return BaseService(AsyncMock())


async def _raise(exc: Exception):
    raise exc


def _integrity(message: str) -> IntegrityError:
    return IntegrityError("INSERT", {}, Exception(message))


class TestExecuteDbOperation:

    async def test_returns_result(self, service):
        async def _ok():
            return 42

        assert await service._execute_db_operation("op", _ok()) == 42

    async def test_unlisted_unique_violation_is_generic_conflict(self, service):
        with pytest.raises(ConflictError, match="Resource already exists"):
            await service._execute_db_operation(
                "create", _raise(_integrity("UNIQUE constraint failed: users.email"))
            )

    async def test_other_integrity_error_becomes_database_error(self, service):
        with pytest.raises(DatabaseError, match="constraint violation: create"):
            await service._execute_db_operation(
                "create", _raise(_integrity("NOT NULL constraint failed: notes.title"))
            )

    async def test_sqlalchemy_error_becomes_database_error(self, service):
        exc = OperationalError("SELECT", {}, Exception("connection lost"))

        with pytest.raises(DatabaseError, match="Database operation failed: list"):
            await service._execute_db_operation("list", _raise(exc))


class TestNamedUniqueViolations:

    @pytest.mark.parametrize(
        "message",
        [
            'duplicate key value violates unique constraint "uq_labels_name"',
            "UNIQUE constraint failed: labels.name",
        ],
        ids=["postgresql", "sqlite"],
    )
    async def test_listed_index_gets_its_message(self, message):
        service = LabelService(AsyncMock())

        with pytest.raises(ConflictError, match="Label name already used"):
            await service._execute_db_operation("create", _raise(_integrity(message)))

    async def test_unlisted_index_falls_back(self):
        service = LabelService(AsyncMock())

        with pytest.raises(ConflictError, match="Resource already exists"):
            await service._execute_db_operation(
                "create", _raise(_integrity("UNIQUE constraint failed: labels.slug"))
            )
