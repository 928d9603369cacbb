"""
Contact Service.

Business logic layer for contacts, always scoped to the calling account.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.ownership import require_owner
from notekeep.backend.models.account import Account
from notekeep.backend.models.contact import Contact
from notekeep.backend.repositories.contact import ContactRepository
from notekeep.backend.schemas.contact import ContactCreate, ContactUpdate, ContactWrite
from notekeep.backend.services.base import BaseService


def _fields(data: ContactWrite) -> dict[str, str | None]:
    return {
        "first_name": data.first_name,
        "last_name": data.last_name,
        "email": str(data.email).lower() if data.email else None,
        "phone": data.phone,
        "address": data.address,
    }


class ContactService(BaseService):
    """Service for contact business logic."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ContactRepository(session)

    async def create_contact(self, caller: Account, data: ContactCreate) -> Contact:
        self._log_operation("Creating contact")

        contact = await self._execute_db_operation(
            "create_contact",
            self.repo.create(**_fields(data), created_by=caller.id, updated_by=caller.id),
        )

        self._log_debug("Contact created", contact_id=contact.id)
        return contact

    async def list_contacts(self, caller: Account) -> list[Contact]:
        return await self.repo.list_by_owner(caller.id)

    async def get_contact(self, caller: Account, contact_id: str) -> Contact:
        """
        Raises:
            NotFoundError: Contact missing, deleted or owned by someone else
        """
        contact = await self.repo.get_by_id(contact_id)
        require_owner(caller.id, contact, "Contact")
        return contact

    async def update_contact(
        self,
        caller: Account,
        contact_id: str,
        data: ContactUpdate,
    ) -> Contact:
        """Replace every field of one of the caller's contacts."""
        contact = await self.repo.get_by_id(contact_id, for_update=True)
        require_owner(caller.id, contact, "Contact")

        self._log_operation("Updating contact", contact_id=contact_id)

        return await self._execute_db_operation(
            "update_contact",
            self.repo.update(contact, **_fields(data), updated_by=caller.id),
        )

    async def delete_contact(self, caller: Account, contact_id: str) -> None:
        contact = await self.repo.get_by_id(contact_id, for_update=True)
        require_owner(caller.id, contact, "Contact")

        self._log_operation("Deleting contact", contact_id=contact_id)

        await self._execute_db_operation(
            "delete_contact",
            self.repo.soft_delete(contact),
        )
