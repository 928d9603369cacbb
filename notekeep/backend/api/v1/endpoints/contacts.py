"""
Contacts API Endpoints.

REST API endpoints for the caller's address book.
"""

from uuid import UUID

from fastapi import APIRouter, Response

from notekeep.backend.core.dependencies import CurrentAccount, DbSession, RequestId
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.schemas.contact import ContactCreate, ContactResponse, ContactUpdate
from notekeep.backend.services.contact import ContactService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[ContactResponse],
    status_code=201,
    summary="Create a contact",
)
async def create_contact(
    account: CurrentAccount,
    data: ContactCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ContactResponse]:
    service = ContactService(db)
    contact = await service.create_contact(account, data)
    return ApiResponse(
        data=ContactResponse.model_validate(contact),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[ContactResponse]],
    summary="List contacts",
)
async def list_contacts(
    account: CurrentAccount,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[ContactResponse]]:
    service = ContactService(db)
    contacts = await service.list_contacts(account)
    return ApiResponse(
        data=[ContactResponse.model_validate(c) for c in contacts],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{contact_id}",
    response_model=ApiResponse[ContactResponse],
    summary="Get a contact",
)
async def get_contact(
    account: CurrentAccount,
    contact_id: UUID,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ContactResponse]:
    service = ContactService(db)
    contact = await service.get_contact(account, str(contact_id))
    return ApiResponse(
        data=ContactResponse.model_validate(contact),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{contact_id}",
    response_model=ApiResponse[ContactResponse],
    summary="Replace a contact",
)
async def update_contact(
    account: CurrentAccount,
    contact_id: UUID,
    data: ContactUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[ContactResponse]:
    service = ContactService(db)
    contact = await service.update_contact(account, str(contact_id), data)
    return ApiResponse(
        data=ContactResponse.model_validate(contact),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{contact_id}",
    status_code=204,
    response_class=Response,
    summary="Delete a contact",
)
async def delete_contact(
    account: CurrentAccount,
    contact_id: UUID,
    db: DbSession,
) -> Response:
    service = ContactService(db)
    await service.delete_contact(account, str(contact_id))
    return Response(status_code=204)
