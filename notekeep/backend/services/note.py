"""
Note Service.

Business logic layer for notes. Every operation on an existing note loads
it, checks the caller owns it, then mutates. An update replaces the note's
fields and all three child collections in one go; whatever children the
request does not list are removed.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.core.ownership import require_owner
from notekeep.backend.core.utils import to_naive_utc, utc_now
from notekeep.backend.models.account import Account
from notekeep.backend.models.note import ChecklistItem, Note, NoteAttachment, Reminder
from notekeep.backend.repositories.note import NoteRepository
from notekeep.backend.schemas.note import NoteCreate, NoteUpdate, NoteWrite
from notekeep.backend.services.base import BaseService


def _build_children(
    data: NoteWrite,
) -> tuple[list[ChecklistItem], list[Reminder], list[NoteAttachment]]:
    """Fresh child rows for a note request, preserving checklist order."""
    items = [
        ChecklistItem(text=item.text, is_checked=item.is_checked, position=position)
        for position, item in enumerate(data.checklist_items)
    ]
    # Same order the relationships load in
    reminders = sorted(
        (Reminder(remind_at=to_naive_utc(r.remind_at)) for r in data.reminders),
        key=lambda r: r.remind_at,
    )
    attachments = [
        NoteAttachment(filename=a.filename, url=a.url, content_type=a.content_type)
        for a in sorted(data.attachments, key=lambda a: a.filename)
    ]
    return items, reminders, attachments


class NoteService(BaseService):
    """
    Service for note business logic.

    Handles note creation, full replacement, retrieval and deletion,
    always scoped to the calling account.
    """

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = NoteRepository(session)

    async def create_note(self, caller: Account, data: NoteCreate) -> Note:
        """
        Create a note with its checklist items, reminders and attachments.

        Args:
            caller: Authenticated account, recorded as owner and last editor
            data: Note creation data

        Returns:
            Created note
        """
        self._log_operation(
            "Creating note",
            checklist_items=len(data.checklist_items),
            reminders=len(data.reminders),
            attachments=len(data.attachments),
        )

        items, reminders, attachments = _build_children(data)
        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=data.title,
                description=data.description,
                is_pinned=data.is_pinned,
                is_archived=data.is_archived,
                is_checklist=data.is_checklist,
                created_by=caller.id,
                updated_by=caller.id,
                checklist_items=items,
                reminders=reminders,
                attachments=attachments,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, caller: Account, note_id: str) -> Note:
        """
        Get one of the caller's notes.

        Raises:
            NotFoundError: Note missing, deleted or owned by someone else
        """
        note = await self.repo.get_by_id(note_id)
        require_owner(caller.id, note, "Note")
        return note

    async def list_notes(self, caller: Account, archived: bool | None = None) -> list[Note]:
        """
        List the caller's notes.

        Args:
            caller: Authenticated account
            archived: Restrict to archived (True) or active (False) notes

        Returns:
            List of notes, pinned first
        """
        return await self.repo.list_by_owner(caller.id, archived=archived)

    async def update_note(self, caller: Account, note_id: str, data: NoteUpdate) -> Note:
        """
        Replace a note and its children.

        Raises:
            NotFoundError: Note missing, deleted or owned by someone else
        """
        note = await self.repo.get_by_id(note_id, for_update=True)
        require_owner(caller.id, note, "Note")

        self._log_operation(
            "Updating note",
            note_id=note_id,
            checklist_items=len(data.checklist_items),
            reminders=len(data.reminders),
            attachments=len(data.attachments),
        )

        await self._execute_db_operation(
            "update_note",
            self.repo.update(
                note,
                title=data.title,
                description=data.description,
                is_pinned=data.is_pinned,
                is_archived=data.is_archived,
                is_checklist=data.is_checklist,
                updated_by=caller.id,
                updated_at=utc_now(),
            ),
        )

        items, reminders, attachments = _build_children(data)
        return await self._execute_db_operation(
            "replace_note_children",
            self.repo.replace_children(note, items, reminders, attachments),
        )

    async def delete_note(self, caller: Account, note_id: str) -> None:
        """
        Soft-delete a note and remove its children.

        Uploaded files referenced by attachments stay in blob storage.

        Raises:
            NotFoundError: Note missing, deleted or owned by someone else
        """
        note = await self.repo.get_by_id(note_id, for_update=True)
        require_owner(caller.id, note, "Note")

        self._log_operation("Deleting note", note_id=note_id)

        await self._execute_db_operation(
            "delete_note_children",
            self.repo.replace_children(note, [], [], []),
        )
        await self._execute_db_operation(
            "delete_note",
            self.repo.soft_delete(note),
        )
