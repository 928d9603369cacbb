"""
Base Schemas.

The response envelope every endpoint returns. Success bodies carry `data`,
failures carry `error`; both carry the request id so a client report can be
matched to the server log line.
"""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from notekeep.backend.core.utils import utc_now

DataT = TypeVar("DataT")


class ResponseMetadata(BaseModel):
    timestamp: datetime = Field(default_factory=utc_now)
    request_id: str | None = None


class ValidationIssue(BaseModel):
    """One rejected input field, as listed under `details.validation_errors`."""

    field: str = Field(description="Dotted location, e.g. body.checklist_items.0.text")
    message: str
    type: str = "unknown"


class ErrorDetail(BaseModel):
    code: str = Field(examples=["RES_NOT_FOUND"])
    message: str
    details: dict[str, Any] | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope wrapping one resource or a list of them."""

    success: bool = True
    data: DataT | None = None
    error: ErrorDetail | None = None
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    model_config = ConfigDict(from_attributes=True)


class ErrorResponse(BaseModel):
    """Failure envelope. `data` is always null."""

    success: bool = False
    data: None = None
    error: ErrorDetail
    metadata: ResponseMetadata = Field(default_factory=ResponseMetadata)

    @classmethod
    def build(
        cls,
        code: str,
        message: str,
        request_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> "ErrorResponse":
        return cls(
            error=ErrorDetail(code=code, message=message, details=details or None),
            metadata=ResponseMetadata(request_id=request_id),
        )
