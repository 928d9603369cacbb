"""
Auth Service.

Password login and refresh for the locally signed JWT strategy.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.exceptions import AuthenticationError
from notekeep.backend.core.security import (
    REFRESH_TOKEN_TYPE,
    create_token_pair,
    decode_token,
    verify_password,
)
from notekeep.backend.repositories.account import AccountRepository
from notekeep.backend.services.base import BaseService

INVALID_LOGIN = "Invalid email or password"


class AuthService(BaseService):
    """Issues token pairs for accounts that sign in with a password."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = AccountRepository(session)

    async def login(self, email: str, password: str) -> dict[str, str]:
        """
        Check credentials and issue access and refresh tokens.

        Raises:
            AuthenticationError: Unknown email, no local password, or wrong password
        """
        account = await self.repo.get_by_email(email)
        if account is None or not account.password_hash:
            self._log_operation("Login rejected", reason="unknown_account")
            raise AuthenticationError(INVALID_LOGIN)

        if not verify_password(password, account.password_hash):
            self._log_operation("Login rejected", reason="bad_password", account_id=account.id)
            raise AuthenticationError(INVALID_LOGIN)

        self._log_operation("Login succeeded", account_id=account.id)
        return create_token_pair(account.id)

    async def refresh(self, refresh_token: str) -> dict[str, str]:
        """
        Exchange a refresh token for a new pair.

        Raises:
            AuthenticationError: Token invalid, not a refresh token, or account gone
        """
        payload = decode_token(refresh_token, expected_type=REFRESH_TOKEN_TYPE)
        account = await self.repo.get_by_id_or_none(str(payload["sub"]))
        if account is None:
            raise AuthenticationError("Account not found or deleted")

        self._log_debug("Tokens refreshed", account_id=account.id)
        return create_token_pair(account.id)
