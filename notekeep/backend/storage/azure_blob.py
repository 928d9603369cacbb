"""
Azure Blob Storage Backend.

One shared container; each account's files sit under `user-<id>/`.
The SDK client is synchronous and runs in the shared I/O thread pool.
"""

from typing import BinaryIO

from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError
from azure.storage.blob import BlobServiceClient, ContainerClient, ContentSettings

from notekeep.backend.core.exceptions import NotFoundError, StorageError
from notekeep.backend.core.logging import get_logger
from notekeep.backend.core.utils import owner_prefix
from notekeep.backend.storage.base import BlobStore, StoredBlob

logger = get_logger(__name__)


def account_url(account_name: str) -> str:
    return f"https://{account_name}.blob.core.windows.net"


class AzureBlobStore(BlobStore):
    """Blob store backed by an Azure Storage container."""

    def __init__(
        self,
        account_name: str,
        account_key: str,
        container: str,
        service_client: BlobServiceClient | None = None,
    ) -> None:
        if service_client is None:
            if not account_name or not account_key:
                raise StorageError("Azure storage account name and key are required")
            service_client = BlobServiceClient(
                account_url=account_url(account_name),
                credential=account_key,
            )
        self._service = service_client
        self._container: ContainerClient = service_client.get_container_client(container)
        self.container_name = container

    @property
    def backend_name(self) -> str:
        return "azure"

    async def ensure_ready(self) -> None:
        try:
            await self.run_blocking(self._container.create_container)
            logger.info("Blob container created", extra={"container": self.container_name})
        except ResourceExistsError:
            logger.debug("Blob container exists", extra={"container": self.container_name})
        except AzureError as e:
            logger.error(
                "Blob container unavailable",
                extra={"container": self.container_name, "error": str(e)},
            )
            raise StorageError(f"Cannot access container '{self.container_name}'") from e

    async def upload_file(
        self,
        owner_id: str,
        filename: str,
        data: BinaryIO,
        content_type: str | None = None,
    ) -> StoredBlob:
        name = self.blob_name(owner_id, filename)
        settings = ContentSettings(content_type=content_type) if content_type else None
        try:
            blob_client = await self.run_blocking(
                self._container.upload_blob,
                name,
                data,
                overwrite=True,
                content_settings=settings,
            )
        except AzureError as e:
            logger.error("Blob upload failed", extra={"blob": name, "error": str(e)})
            raise StorageError(f"Failed to upload '{filename}'") from e

        logger.info("Blob uploaded", extra={"blob": name})
        return StoredBlob(
            filename=name.removeprefix(owner_prefix(owner_id)),
            url=blob_client.url,
            content_type=content_type,
        )

    async def list_files(self, owner_id: str) -> list[str]:
        prefix = owner_prefix(owner_id)

        def _collect() -> list[str]:
            return [
                blob.name.removeprefix(prefix)
                for blob in self._container.list_blobs(name_starts_with=prefix)
            ]

        try:
            files = await self.run_blocking(_collect)
        except AzureError as e:
            logger.error("Blob listing failed", extra={"prefix": prefix, "error": str(e)})
            raise StorageError("Failed to list files") from e

        logger.debug("Blobs listed", extra={"prefix": prefix, "count": len(files)})
        return files

    async def delete_file(self, owner_id: str, filename: str) -> None:
        name = self.blob_name(owner_id, filename)
        try:
            await self.run_blocking(self._container.delete_blob, name)
        except ResourceNotFoundError as e:
            raise NotFoundError("File not found") from e
        except AzureError as e:
            logger.error("Blob delete failed", extra={"blob": name, "error": str(e)})
            raise StorageError(f"Failed to delete '{filename}'") from e
        logger.info("Blob deleted", extra={"blob": name})

    async def aclose(self) -> None:
        await self.run_blocking(self._service.close)
