"""
Contact Repository.

Data access layer for contacts.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.models.contact import Contact
from notekeep.backend.repositories.base import BaseRepository


class ContactRepository(BaseRepository[Contact]):
    """Repository for Contact model."""

    model = Contact

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_by_owner(self, owner_id: str) -> list[Contact]:
        """The owner's live contacts, sorted by last then first name."""
        result = await self.session.execute(
            self._select()
            .where(Contact.created_by == owner_id)
            .order_by(Contact.last_name, Contact.first_name)
        )
        return list(result.scalars().all())
