"""
Base Service.

Services own the business rules for one resource: they load rows through a
repository, check ownership, and translate database failures into the
application's error types. The request's session owns the transaction;
services only flush.
"""

from collections.abc import Awaitable
from typing import Any, ClassVar, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.exceptions import ConflictError, DatabaseError
from notekeep.backend.core.logging import get_logger

T = TypeVar("T")


class BaseService:
    """
    Shared plumbing for resource services.

    Subclasses list the unique indexes their writes can trip in
    `unique_violations`, keyed by index name (PostgreSQL reports it) and by
    `table.column` (SQLite reports that instead). A match turns the
    IntegrityError into a ConflictError with the mapped message.
    """

    unique_violations: ClassVar[dict[str, str]] = {}

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    def _conflict_message(self, error_text: str) -> str | None:
        for marker, message in self.unique_violations.items():
            if marker in error_text:
                return message
        if "unique" in error_text or "duplicate" in error_text:
            return "Resource already exists"
        return None

    async def _execute_db_operation(self, operation: str, coro: Awaitable[T]) -> T:
        """
        Await a repository call, mapping SQLAlchemy failures.

        Raises:
            ConflictError: A unique index rejected the write
            DatabaseError: Any other database failure
        """
        try:
            return await coro
        except IntegrityError as e:
            error_text = str(e.orig if e.orig is not None else e).lower()
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "error": error_text},
            )
            message = self._conflict_message(error_text)
            if message is not None:
                raise ConflictError(message) from e
            raise DatabaseError(f"Database constraint violation: {operation}") from e
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}") from e

    def _log_operation(self, operation: str, **context: Any) -> None:
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
