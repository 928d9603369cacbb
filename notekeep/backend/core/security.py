"""
Security Utilities.

Password hashing and JWT issuing/decoding.
"""

from datetime import timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from notekeep.backend.core.config import get_app_config, get_settings
from notekeep.backend.core.exceptions import AuthenticationError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import utc_now

logger = get_logger(__name__)

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

# bcrypt only reads the first 72 bytes of a password; bcrypt 5 rejects longer input
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    """Whether the UTF-8 encoding exceeds what bcrypt accepts."""
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Passwords bcrypt cannot take never match."""
    if password_too_long(plain_password):
        return False
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def _encode(data: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    jwt_config = get_app_config().security.jwt
    claims = {
        **data,
        "exp": utc_now() + expires_delta,
        "type": token_type,
        "aud": jwt_config.audience,
    }
    return jwt.encode(claims, get_settings().jwt_secret, algorithm=jwt_config.algorithm)


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """`data` is normally {"sub": account_id}; lifetime defaults to access_token_expire_minutes."""
    if expires_delta is None:
        expires_delta = timedelta(minutes=get_app_config().security.jwt.access_token_expire_minutes)
    return _encode(data, ACCESS_TOKEN_TYPE, expires_delta)


def create_refresh_token(data: dict[str, Any]) -> str:
    days = get_app_config().security.jwt.refresh_token_expire_days
    return _encode(data, REFRESH_TOKEN_TYPE, timedelta(days=days))


def create_token_pair(subject: str) -> dict[str, str]:
    """Issue an access and refresh token for the same subject."""
    return {
        "access_token": create_access_token({"sub": subject}),
        "refresh_token": create_refresh_token({"sub": subject}),
        "token_type": "bearer",
    }


def decode_token(token: str, expected_type: str | None = None) -> dict[str, Any]:
    """
    Decode and validate a JWT token.

    Args:
        token: JWT token string
        expected_type: Reject the token unless its `type` claim matches

    Returns:
        Decoded token payload

    Raises:
        AuthenticationError: If token is invalid, expired or of the wrong type
    """
    settings = get_settings()
    jwt_config = get_app_config().security.jwt
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[jwt_config.algorithm],
            audience=jwt_config.audience,
        )
    except JWTError as e:
        logger.warning("Token decode failed", extra={"error": str(e)})
        raise AuthenticationError("Invalid or expired token")

    if expected_type is not None and payload.get("type") != expected_type:
        logger.warning(
            "Token type mismatch",
            extra={"expected": expected_type, "actual": payload.get("type")},
        )
        raise AuthenticationError("Invalid or expired token")

    if not payload.get("sub"):
        raise AuthenticationError("Token has no subject")

    return payload
