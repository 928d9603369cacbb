"""
Note Schemas.

Pydantic schemas for note API request/response validation.

Create and update share one shape: an update is a full replacement, so
omitted child lists mean "no children" and wipe whatever was there.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChecklistItemIn(BaseModel):
    """One checklist line in a note request."""

    text: str = Field(..., min_length=1, max_length=1000, examples=["Buy milk"])
    is_checked: bool = False


class ReminderIn(BaseModel):
    """A reminder in a note request. Aware datetimes are converted to UTC."""

    remind_at: datetime = Field(..., examples=["2030-01-01T09:00:00Z"])


class AttachmentIn(BaseModel):
    """A reference to an uploaded file in a note request."""

    filename: str = Field(..., min_length=1, max_length=255, examples=["receipt.pdf"])
    url: str = Field(..., min_length=1, max_length=2048)
    content_type: str | None = Field(default=None, max_length=255)


class NoteWrite(BaseModel):
    """Schema for creating or fully replacing a note."""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Note title",
        examples=["Groceries"],
    )
    description: str = Field(
        default="",
        max_length=10000,
        description="Free-text body",
    )
    is_pinned: bool = False
    is_archived: bool = False
    is_checklist: bool = False
    checklist_items: list[ChecklistItemIn] = Field(default_factory=list)
    reminders: list[ReminderIn] = Field(default_factory=list)
    attachments: list[AttachmentIn] = Field(default_factory=list)


class NoteCreate(NoteWrite):
    """Schema for creating a new note."""


class NoteUpdate(NoteWrite):
    """Schema for replacing an existing note, children included."""


class ChecklistItemResponse(BaseModel):
    id: str
    text: str
    is_checked: bool
    position: int

    model_config = ConfigDict(from_attributes=True)


class ReminderResponse(BaseModel):
    id: str
    remind_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AttachmentResponse(BaseModel):
    id: str
    filename: str
    url: str
    content_type: str | None

    model_config = ConfigDict(from_attributes=True)


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str
    description: str
    is_pinned: bool
    is_archived: bool
    is_checklist: bool
    created_by: str = Field(description="Owner account id")
    updated_by: str = Field(description="Account that last wrote the note")
    checklist_items: list[ChecklistItemResponse]
    reminders: list[ReminderResponse]
    attachments: list[AttachmentResponse]
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
