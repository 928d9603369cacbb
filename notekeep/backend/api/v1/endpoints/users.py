"""
Users API Endpoints.

Sign-up is public. Reading profiles needs a signed-in caller; changing or
deleting a profile, or uploading its image, is only allowed on the
caller's own account.
"""

from uuid import UUID

from fastapi import APIRouter, File, Response, UploadFile

from notekeep.backend.core.dependencies import CurrentAccount, DbSession, FileServiceDep, RequestId
from notekeep.backend.schemas.account import AccountCreate, AccountResponse, AccountUpdate
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.services.account import AccountService

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[AccountResponse],
    status_code=201,
    summary="Sign up",
    description="Create an account with either a password or an external identity reference.",
)
async def create_user(
    data: AccountCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AccountResponse]:
    service = AccountService(db)
    account = await service.sign_up(data)
    return ApiResponse(
        data=AccountResponse.model_validate(account),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[list[AccountResponse]],
    summary="List users",
)
async def list_users(
    account: CurrentAccount,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[list[AccountResponse]]:
    service = AccountService(db)
    accounts = await service.list_accounts()
    return ApiResponse(
        data=[AccountResponse.model_validate(a) for a in accounts],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/{user_id}",
    response_model=ApiResponse[AccountResponse],
    summary="Get a user profile",
)
async def get_user(
    account: CurrentAccount,
    user_id: UUID,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AccountResponse]:
    service = AccountService(db)
    found = await service.get_account(str(user_id))
    return ApiResponse(
        data=AccountResponse.model_validate(found),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.put(
    "/{user_id}",
    response_model=ApiResponse[AccountResponse],
    summary="Replace own profile",
)
async def update_user(
    account: CurrentAccount,
    user_id: UUID,
    data: AccountUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[AccountResponse]:
    service = AccountService(db)
    updated = await service.update_account(account, str(user_id), data)
    return ApiResponse(
        data=AccountResponse.model_validate(updated),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{user_id}",
    status_code=204,
    response_class=Response,
    summary="Delete own account",
)
async def delete_user(
    account: CurrentAccount,
    user_id: UUID,
    db: DbSession,
) -> Response:
    service = AccountService(db)
    await service.delete_account(account, str(user_id))
    return Response(status_code=204)


@router.post(
    "/{user_id}/image",
    response_model=ApiResponse[AccountResponse],
    summary="Upload own profile image",
)
async def upload_user_image(
    account: CurrentAccount,
    user_id: UUID,
    db: DbSession,
    files: FileServiceDep,
    request_id: RequestId,
    file: UploadFile = File(...),
) -> ApiResponse[AccountResponse]:
    service = AccountService(db)
    updated = await service.set_profile_image(
        account,
        str(user_id),
        files,
        filename=file.filename,
        data=file.file,
        content_type=file.content_type,
        size=file.size,
    )
    return ApiResponse(
        data=AccountResponse.model_validate(updated),
        metadata=ResponseMetadata(request_id=request_id),
    )
