"""
Blob Store Interface.

Per-account file storage. Every blob lives under `user-<account id>/`, so a
caller can only ever address their own files. Callers pass bare filenames;
the store builds the full blob name.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable

from notekeep.backend.core.concurrency import run_in_io_pool
from notekeep.backend.core.utils import owner_prefix, validate_filename


@dataclass(frozen=True)
class StoredBlob:
    """Result of an upload."""

    filename: str
    url: str
    content_type: str | None


class BlobStore(ABC):
    """Contract shared by all blob storage backends."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Backend identifier as written in storage.yaml."""

    @abstractmethod
    async def ensure_ready(self) -> None:
        """Create the container/directory if missing. Called once at startup."""

    @abstractmethod
    async def upload_file(
        self,
        owner_id: str,
        filename: str,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> StoredBlob:
        """Store a file, replacing any existing file with the same name."""

    @abstractmethod
    async def list_files(self, owner_id: str) -> list[str]:
        """Filenames stored for the owner, without the owner prefix."""

    @abstractmethod
    async def delete_file(self, owner_id: str, filename: str) -> None:
        """
        Remove one file.

        Raises:
            NotFoundError: If the owner has no file with that name
        """

    async def aclose(self) -> None:
        """Release client resources."""

    @staticmethod
    def blob_name(owner_id: str, filename: str) -> str:
        """Full blob name for an owner's file. Validates the filename."""
        return f"{owner_prefix(owner_id)}{validate_filename(filename)}"

    @staticmethod
    async def run_blocking(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run a blocking SDK or filesystem call in the shared I/O pool."""
        return await run_in_io_pool(fn, *args, **kwargs)
