"""
Contact Schemas.

Pydantic schemas for contact API request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ContactWrite(BaseModel):
    """Schema for creating or fully replacing a contact."""

    first_name: str = Field(..., min_length=1, max_length=100, examples=["Grace"])
    last_name: str = Field(default="", max_length=100, examples=["Hopper"])
    email: EmailStr | None = None
    phone: str | None = Field(default=None, max_length=50, examples=["+1 555 0100"])
    address: str | None = Field(default=None, max_length=1000)


class ContactCreate(ContactWrite):
    """Schema for creating a new contact."""


class ContactUpdate(ContactWrite):
    """Schema for replacing an existing contact."""


class ContactResponse(BaseModel):
    """Schema for contact in API responses."""

    id: str
    first_name: str
    last_name: str
    email: str | None
    phone: str | None
    address: str | None
    created_by: str
    updated_by: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
