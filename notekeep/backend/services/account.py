"""
Account Service.

Sign-up, profile reads and edits, soft delete and profile images.
An account may only modify itself; anyone signed in may read profiles.
"""

from typing import BinaryIO

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.exceptions import (
    ApplicationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from notekeep.backend.core.ownership import require_owner
from notekeep.backend.core.security import hash_password
from notekeep.backend.models.account import Account
from notekeep.backend.repositories.account import AccountRepository
from notekeep.backend.schemas.account import AccountCreate, AccountUpdate
from notekeep.backend.services.base import BaseService
from notekeep.backend.services.file import FileService

EMAIL_TAKEN = "User with this email already exists"
EXTERNAL_ID_TAKEN = "User with this external id already exists"


class AccountService(BaseService):
    """Service for account business logic."""

    # Concurrent sign-ups that slip past the lookups below hit these indexes
    unique_violations = {
        "uq_users_email_live": EMAIL_TAKEN,
        "users.email": EMAIL_TAKEN,
        "uq_users_external_id_live": EXTERNAL_ID_TAKEN,
        "users.external_id": EXTERNAL_ID_TAKEN,
    }

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AccountRepository(session)

    async def sign_up(self, data: AccountCreate) -> Account:
        """
        Create an account.

        Raises:
            ValidationError: Neither external_id nor password given
            ConflictError: Email or external_id already used by a live account
        """
        if not data.external_id and not data.password:
            raise ValidationError(
                "Password is required for manual sign-up",
                details={"password": "Required when external_id is not provided"},
            )

        email = str(data.email).lower()
        if await self.repo.get_by_email(email) is not None:
            raise ConflictError(EMAIL_TAKEN)
        if data.external_id and await self.repo.get_by_external_id(data.external_id):
            raise ConflictError(EXTERNAL_ID_TAKEN)

        self._log_operation(
            "Creating account",
            sign_in="external" if data.external_id else "password",
        )

        account = await self._execute_db_operation(
            "sign_up",
            self.repo.create(
                first_name=data.first_name,
                last_name=data.last_name,
                email=email,
                external_id=data.external_id,
                password_hash=hash_password(data.password) if data.password else None,
                image_url=data.image_url,
            ),
        )

        self._log_debug("Account created", account_id=account.id)
        return account

    async def list_accounts(self) -> list[Account]:
        return await self.repo.list_active()

    async def get_account(self, account_id: str) -> Account:
        """
        Raises:
            NotFoundError: No live account with that id
        """
        return await self.repo.get_by_id(account_id)

    async def _load_own(self, caller: Account, account_id: str) -> Account:
        account = await self.repo.get_by_id(account_id, for_update=True)
        require_owner(caller.id, account, self.repo.label, owner_attr="id")
        return account

    async def update_account(
        self,
        caller: Account,
        account_id: str,
        data: AccountUpdate,
    ) -> Account:
        """
        Replace the caller's own profile.

        Raises:
            NotFoundError: Account missing or not the caller's
            ConflictError: New email belongs to another live account
        """
        account = await self._load_own(caller, account_id)

        email = str(data.email).lower()
        if email != account.email.lower():
            other = await self.repo.get_by_email(email)
            if other is not None and other.id != account.id:
                raise ConflictError(EMAIL_TAKEN)

        self._log_operation("Updating account", account_id=account_id)

        return await self._execute_db_operation(
            "update_account",
            self.repo.update(
                account,
                first_name=data.first_name,
                last_name=data.last_name,
                email=email,
                image_url=data.image_url,
            ),
        )

    async def delete_account(self, caller: Account, account_id: str) -> None:
        """Soft-delete the caller's own account."""
        account = await self._load_own(caller, account_id)

        self._log_operation("Deleting account", account_id=account_id)

        await self._execute_db_operation(
            "delete_account",
            self.repo.soft_delete(account),
        )

    async def set_profile_image(
        self,
        caller: Account,
        account_id: str,
        files: FileService,
        filename: str | None,
        data: BinaryIO,
        content_type: str | None,
        size: int | None = None,
    ) -> Account:
        """
        Store an image in the caller's folder and point the profile at it.

        The upload goes through FileService, so the same filename rules and
        size cap as /files apply. If the profile row cannot be written the
        blob is removed again.

        Raises:
            NotFoundError: Account missing or not the caller's
            ValidationError: Bad filename or image over the size limit
        """
        account = await self._load_own(caller, account_id)

        blob = await files.upload(account, filename, data, content_type, size=size)

        try:
            updated = await self._execute_db_operation(
                "set_profile_image",
                self.repo.update(account, image_url=blob.url),
            )
        except (ConflictError, DatabaseError):
            await self._discard_image(files, account, blob.filename)
            raise

        self._log_operation("Profile image updated", account_id=account_id, filename=blob.filename)
        return updated

    async def _discard_image(self, files: FileService, account: Account, filename: str) -> None:
        try:
            await files.delete(account, filename)
        except ApplicationError as e:
            self._logger.error(
                "Could not remove profile image after failed update",
                extra={"account_id": account.id, "filename": filename, "error": e.message},
            )
