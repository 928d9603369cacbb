"""
Local Filesystem Backend.

Development stand-in for Azure: files are written below a directory on
disk using the same `user-<id>/<filename>` layout.
"""

import shutil
from pathlib import Path
from typing import BinaryIO
from urllib.parse import quote

from notekeep.backend.core.exceptions import NotFoundError, StorageError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import owner_prefix
from notekeep.backend.storage.base import BlobStore, StoredBlob

logger = get_logger(__name__)


class LocalBlobStore(BlobStore):
    """Blob store that writes to a local directory."""

    def __init__(self, root: str | Path, base_url: str) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")

    @property
    def backend_name(self) -> str:
        return "local"

    def _path(self, blob_name: str) -> Path:
        return self.root / blob_name

    async def ensure_ready(self) -> None:
        try:
            await self.run_blocking(self.root.mkdir, parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create storage directory {self.root}") from e
        logger.info("Local blob store ready", extra={"path": str(self.root)})

    async def upload_file(
        self,
        owner_id: str,
        filename: str,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> StoredBlob:
        name = self.blob_name(owner_id, filename)
        target = self._path(name)

        def _write() -> None:
            target.parent.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                shutil.copyfileobj(data, out)

        try:
            await self.run_blocking(_write)
        except OSError as e:
            logger.error("File write failed", extra={"blob": name, "error": str(e)})
            raise StorageError(f"Failed to upload '{filename}'") from e

        logger.info("File stored", extra={"blob": name})
        return StoredBlob(
            filename=target.name,
            url=f"{self.base_url}/{quote(name)}",
            content_type=content_type,
        )

    async def list_files(self, owner_id: str) -> list[str]:
        folder = self.root / owner_prefix(owner_id)

        def _collect() -> list[str]:
            if not folder.is_dir():
                return []
            return sorted(p.name for p in folder.iterdir() if p.is_file())

        try:
            return await self.run_blocking(_collect)
        except OSError as e:
            raise StorageError("Failed to list files") from e

    async def delete_file(self, owner_id: str, filename: str) -> None:
        target = self._path(self.blob_name(owner_id, filename))
        try:
            await self.run_blocking(target.unlink)
        except FileNotFoundError as e:
            raise NotFoundError("File not found") from e
        except OSError as e:
            raise StorageError(f"Failed to delete '{filename}'") from e
        logger.info("File deleted", extra={"path": str(target)})
