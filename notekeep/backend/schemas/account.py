"""
Account Schemas.

Pydantic schemas for sign-up, profile edits and public profiles.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from notekeep.backend.core.security import MAX_PASSWORD_BYTES, password_too_long


class AccountCreate(BaseModel):
    """
    Schema for signing up.

    Either `external_id` (account managed by an external identity provider)
    or `password` (local sign-in) must be present. The service enforces this
    so the error carries a specific message.
    """

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Ada"])
    last_name: str = Field(default="", max_length=100, examples=["Lovelace"])
    email: EmailStr = Field(..., examples=["ada@example.com"])
    external_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=255,
        description="User reference issued by the external identity provider",
    )
    password: str | None = Field(
        default=None,
        min_length=6,
        max_length=MAX_PASSWORD_BYTES,
        description="Password for local sign-in",
    )
    image_url: str | None = Field(default=None, max_length=2048)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str | None) -> str | None:
        if v is not None and password_too_long(v):
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes in UTF-8")
        return v


class AccountUpdate(BaseModel):
    """Schema for replacing a profile. Omitted optional fields are cleared."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(default="", max_length=100)
    email: EmailStr
    image_url: str | None = Field(default=None, max_length=2048)


class AccountResponse(BaseModel):
    """Public profile. Never carries credentials."""

    id: str = Field(description="Account unique identifier")
    first_name: str
    last_name: str
    email: str
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
