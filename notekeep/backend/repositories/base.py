"""
Base Repository.

Base class for all repositories with common CRUD operations.

Repositories only store and fetch rows. They never decide who may see or
change a row; services run the ownership check before calling update or
soft_delete.
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.exceptions import NotFoundError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import utc_now
from notekeep.backend.models.base import Base, SoftDeleteMixin

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations.

    Subclasses should set the model class:

        class ContactRepository(BaseRepository[Contact]):
            model = Contact

    For models with a deleted_at column, every read excludes soft-deleted rows.
    """

    model: type[ModelType]
    owner_column: str = "created_by"

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @property
    def label(self) -> str:
        """Human readable entity name used in error messages."""
        return self.model.__name__

    def _select(self) -> Select:
        """Base SELECT with soft-deleted rows filtered out."""
        stmt = select(self.model)
        if issubclass(self.model, SoftDeleteMixin):
            stmt = stmt.where(self.model.deleted_at.is_(None))
        return stmt

    async def get_by_id_or_none(
        self,
        id: str | UUID,
        for_update: bool = False,
    ) -> ModelType | None:
        """Get a single live record by ID, returning None if not found."""
        stmt = self._select().where(self.model.id == str(id))
        if for_update:
            stmt = stmt.with_for_update()
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, id: str | UUID, for_update: bool = False) -> ModelType:
        """
        Get a single live record by ID.

        Args:
            id: Primary key
            for_update: Lock the row until the transaction ends

        Raises:
            NotFoundError: If record not found or soft-deleted
        """
        instance = await self.get_by_id_or_none(id, for_update=for_update)

        if instance is None:
            raise NotFoundError(f"{self.label} not found")

        return instance

    async def list_by_owner(self, owner_id: str | UUID) -> list[ModelType]:
        """Get all live records created by the given account."""
        owner = getattr(self.model, self.owner_column)
        result = await self.session.execute(
            self._select().where(owner == str(owner_id))
        )
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, instance: ModelType, **kwargs: Any) -> ModelType:
        """
        Overwrite fields on an already loaded record.

        Every field passed is written, including None, so callers get
        full-replacement semantics by passing the complete field set.
        """
        for key, value in kwargs.items():
            if not hasattr(instance, key):
                raise AttributeError(f"{self.label} has no field {key!r}")
            setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def soft_delete(self, instance: ModelType) -> None:
        """Mark a record as deleted. It disappears from all reads."""
        instance.deleted_at = utc_now()
        await self.session.flush()
