"""
Note Model.

A note owned by the account that created it, with three child collections:
checklist items, reminders and attachments. Children live and die with
their note and are replaced wholesale on every update.
"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from notekeep.backend.models.base import Base, SoftDeleteMixin, TimestampMixin, UUIDMixin


class Note(UUIDMixin, TimestampMixin, SoftDeleteMixin, Base):
    """Note database model."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    is_pinned: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_archived: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_checklist: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    updated_by: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id"),
        nullable=False,
    )

    checklist_items: Mapped[list["ChecklistItem"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="ChecklistItem.position",
    )
    reminders: Mapped[list["Reminder"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="Reminder.remind_at",
    )
    attachments: Mapped[list["NoteAttachment"]] = relationship(
        back_populates="note",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="NoteAttachment.filename",
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r})>"


class ChecklistItem(UUIDMixin, TimestampMixin, Base):
    """One line of a checklist note."""

    __tablename__ = "checklist_items"

    note_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_checked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    note: Mapped[Note] = relationship(back_populates="checklist_items")


class Reminder(UUIDMixin, Base):
    """A point in time at which the note's owner wants to be reminded."""

    __tablename__ = "reminders"

    note_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    remind_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    note: Mapped[Note] = relationship(back_populates="reminders")


class NoteAttachment(UUIDMixin, Base):
    """Reference to a file in blob storage."""

    __tablename__ = "note_attachments"

    note_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(2048), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(255), nullable=True)

    note: Mapped[Note] = relationship(back_populates="attachments")
