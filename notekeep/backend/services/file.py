"""
File Service.

Per-account file storage on top of the configured blob store. Needs no
database: the owner prefix in the blob name is the ownership record.
"""

from typing import BinaryIO

from notekeep.backend.core.exceptions import ValidationError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import validate_filename
from notekeep.backend.models.account import Account
from notekeep.backend.storage.base import BlobStore, StoredBlob


class FileService:
    """Upload, list and delete the caller's files."""

    def __init__(self, store: BlobStore, max_upload_bytes: int | None = None) -> None:
        self.store = store
        self.max_upload_bytes = max_upload_bytes
        self._logger = get_logger(self.__class__.__module__)

    def _check_size(self, size: int | None) -> None:
        if self.max_upload_bytes is not None and size is not None and size > self.max_upload_bytes:
            raise ValidationError(
                "File too large",
                details={"size": size, "max_bytes": self.max_upload_bytes},
            )

    async def upload(
        self,
        caller: Account,
        filename: str | None,
        data: BinaryIO,
        content_type: str | None = None,
        size: int | None = None,
    ) -> StoredBlob:
        """
        Store one file in the caller's folder.

        Raises:
            ValidationError: Bad filename or file over the size limit
            StorageError: Backend failure
        """
        name = validate_filename(filename)
        self._check_size(size)

        blob = await self.store.upload_file(caller.id, name, data, content_type)
        self._logger.info(
            "File uploaded",
            extra={"service": self.__class__.__name__, "filename": blob.filename, "size": size},
        )
        return blob

    async def list_files(self, caller: Account) -> list[str]:
        return await self.store.list_files(caller.id)

    async def delete(self, caller: Account, filename: str) -> None:
        """
        Raises:
            NotFoundError: Caller has no file by that name
        """
        name = validate_filename(filename)
        await self.store.delete_file(caller.id, name)
        self._logger.info(
            "File deleted",
            extra={"service": self.__class__.__name__, "filename": name},
        )
