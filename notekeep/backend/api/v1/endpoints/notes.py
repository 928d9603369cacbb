"""
Notes API Endpoints.

REST API endpoints for the caller's notes. PUT replaces the note together
with its checklist items, reminders and attachments.
"""

from uuid import UUID

from fastapi import APIRouter, Query, Response

from notekeep.backend.core.dependencies import CurrentAccount, DbSession, RequestId
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from notekeep.backend.services.note import NoteService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[NoteResponse],
    status_code=201,
    summary="Create a note",
    description="Create a note with optional checklist items, reminders and attachments.",
)
async def create_note(
    account: CurrentAccount,
    data: NoteCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Create a new note owned by the caller."""
    service = NoteService(db)
    note = await service.create_note(account, data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[NoteResponse]],
    summary="List notes",
    description="List the caller's notes, pinned first then newest first.",
)
async def list_notes(
    account: CurrentAccount,
    db: DbSession,
    request_id: RequestId,
    archived: bool | None = Query(
        default=None,
        description="Only archived (true) or only active (false) notes",
    ),
) -> ApiResponse[list[NoteResponse]]:
    """List the caller's notes."""
    service = NoteService(db)
    notes = await service.list_notes(account, archived=archived)
    return ApiResponse(
        data=[NoteResponse.model_validate(note) for note in notes],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Get a note",
)
async def get_note(
    account: CurrentAccount,
    note_id: UUID,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Get one of the caller's notes by ID."""
    service = NoteService(db)
    note = await service.get_note(account, str(note_id))
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{note_id}",
    response_model=ApiResponse[NoteResponse],
    summary="Replace a note",
    description="Overwrite the note and replace all of its children with the ones given.",
)
async def update_note(
    account: CurrentAccount,
    note_id: UUID,
    data: NoteUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[NoteResponse]:
    """Replace a note."""
    service = NoteService(db)
    note = await service.update_note(account, str(note_id), data)
    return ApiResponse(
        data=NoteResponse.model_validate(note),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{note_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a note",
    description="Soft-delete a note and remove its children.",
)
async def delete_note(
    account: CurrentAccount,
    note_id: UUID,
    db: DbSession,
) -> Response:
    """Delete a note."""
    service = NoteService(db)
    await service.delete_note(account, str(note_id))
    return Response(status_code=204)
