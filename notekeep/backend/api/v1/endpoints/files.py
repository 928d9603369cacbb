"""
Files API Endpoints.

Per-account blob storage. Callers only ever see their own folder.
"""

from fastapi import APIRouter, File, Response, UploadFile

from notekeep.backend.core.dependencies import CurrentAccount, FileServiceDep, RequestId
from notekeep.backend.schemas.base import ApiResponse, ResponseMetadata
from notekeep.backend.schemas.file import FileListResponse, FileUploadResponse

router = APIRouter()


@router.post(
    "/upload",
    response_model=ApiResponse[FileUploadResponse],
    status_code=201,
    summary="Upload a file",
)
async def upload_file(
    account: CurrentAccount,
    files: FileServiceDep,
    request_id: RequestId,
    file: UploadFile = File(...),
) -> ApiResponse[FileUploadResponse]:
    blob = await files.upload(
        account,
        filename=file.filename,
        data=file.file,
        content_type=file.content_type,
        size=file.size,
    )
    return ApiResponse(
        data=FileUploadResponse(
            filename=blob.filename,
            url=blob.url,
            content_type=blob.content_type,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    response_model=ApiResponse[FileListResponse],
    summary="List own files",
)
async def list_files(
    account: CurrentAccount,
    files: FileServiceDep,
    request_id: RequestId,
) -> ApiResponse[FileListResponse]:
    names = await files.list_files(account)
    return ApiResponse(
        data=FileListResponse(files=names),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{filename}",
    status_code=204,
    response_class=Response,
    summary="Delete a file",
)
async def delete_file(
    account: CurrentAccount,
    filename: str,
    files: FileServiceDep,
) -> Response:
    await files.delete(account, filename)
    return Response(status_code=204)
