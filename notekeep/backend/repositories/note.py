"""
Note Repository.

Data access layer for notes and their child rows.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from notekeep.backend.models.note import ChecklistItem, Note, NoteAttachment, Reminder
from notekeep.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Child collections load eagerly with the note, so a fetched note can be
    serialized without further queries.
    """

    model = Note

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)

    async def list_by_owner(
        self,
        owner_id: str,
        archived: bool | None = None,
    ) -> list[Note]:
        """
        Get the owner's live notes, pinned first then newest first.

        Args:
            owner_id: Account that created the notes
            archived: Only archived (True) or only active (False) notes; None for both

        Returns:
            List of notes
        """
        stmt = self._select().where(Note.created_by == owner_id)
        if archived is not None:
            stmt = stmt.where(Note.is_archived == archived)
        stmt = stmt.order_by(Note.is_pinned.desc(), Note.created_at.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_children(
        self,
        note: Note,
        checklist_items: list[ChecklistItem],
        reminders: list[Reminder],
        attachments: list[NoteAttachment],
    ) -> Note:
        """
        Swap every child collection for a new set.

        The previous children become orphans and are deleted on flush.
        """
        note.checklist_items = checklist_items
        note.reminders = reminders
        note.attachments = attachments
        await self.session.flush()
        await self.session.refresh(note)
        return note
