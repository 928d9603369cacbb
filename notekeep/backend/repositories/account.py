"""
Account Repository.

Data access layer for accounts.
"""

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.models.account import Account
from notekeep.backend.repositories.base import BaseRepository


class AccountRepository(BaseRepository[Account]):
    """Repository for Account model. An account is owned by itself."""

    model = Account
    owner_column = "id"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    @property
    def label(self) -> str:
        return "User"

    async def get_by_email(self, email: str) -> Account | None:
        """Find a live account by email, case-insensitively."""
        result = await self.session.execute(
            self._select().where(func.lower(Account.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Account | None:
        """Find a live account by its external identity reference."""
        result = await self.session.execute(
            self._select().where(Account.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def list_active(self) -> list[Account]:
        """All live accounts ordered by name."""
        result = await self.session.execute(
            self._select().order_by(Account.first_name, Account.last_name)
        )
        return list(result.scalars().all())
