"""
File Schemas.

Responses for the per-account blob storage endpoints.
"""

from pydantic import BaseModel, Field


class FileUploadResponse(BaseModel):
    """Result of storing one file."""

    filename: str = Field(description="Name of the stored file")
    url: str = Field(description="Public URL of the blob")
    content_type: str | None = None


class FileListResponse(BaseModel):
    """Filenames stored for the caller."""

    files: list[str]
