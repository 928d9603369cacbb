# Importing the package registers every model on Base.metadata
from notekeep.backend.models.account import Account
from notekeep.backend.models.base import Base
from notekeep.backend.models.contact import Contact
from notekeep.backend.models.note import ChecklistItem, Note, NoteAttachment, Reminder

__all__ = [
    "Account",
    "Base",
    "ChecklistItem",
    "Contact",
    "Note",
    "NoteAttachment",
    "Reminder",
]
