"""
Auth API Endpoints.

Password login and token refresh. Mounted only when security.yaml selects
the jwt strategy; with an external identity provider, tokens come from
that provider instead.
"""

from fastapi import APIRouter

from notekeep.backend.core.dependencies import DbSession, RequestId
from notekeep.backend.schemas.auth import LoginRequest, RefreshRequest, TokenResponse
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.services.auth import AuthService

router = APIRouter()


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Log in with email and password",
)
async def login(
    data: LoginRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TokenResponse]:
    service = AuthService(db)
    tokens = await service.login(str(data.email), data.password)
    return ApiResponse(
        data=TokenResponse(**tokens),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    summary="Exchange a refresh token for a new token pair",
)
async def refresh(
    data: RefreshRequest,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[TokenResponse]:
    service = AuthService(db)
    tokens = await service.refresh(data.refresh_token)
    return ApiResponse(
        data=TokenResponse(**tokens),
        metadata=ResponseMetadata(request_id=request_id),
    )
