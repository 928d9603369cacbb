"""
Blob Storage.

Pick a backend with build_blob_store(); endpoints reach the process-wide
instance through the get_blob_store dependency.
"""

from fastapi import Request

from notekeep.backend.core.exceptions import StorageError
from notekeep.backend.storage.base import BlobStore, StoredBlob


def build_blob_store(app_config=None, settings=None) -> BlobStore:
    """Create the blob store selected by storage.yaml."""
    if app_config is None or settings is None:
        from notekeep.backend.core.config import get_app_config, get_settings

        app_config = app_config or get_app_config()
        settings = settings or get_settings()

    storage = app_config.storage
    if storage.backend == "azure":
        from notekeep.backend.storage.azure_blob import AzureBlobStore

        return AzureBlobStore(
            account_name=storage.azure.account_name,
            account_key=settings.azure_storage_key,
            container=storage.azure.container,
        )

    from notekeep.backend.core.config import find_project_root
    from notekeep.backend.storage.local import LocalBlobStore

    root = find_project_root() / storage.local.path
    return LocalBlobStore(root=root, base_url=storage.local.base_url)


def get_blob_store(request: Request) -> BlobStore:
    """Dependency returning the store created during application startup."""
    store = getattr(request.app.state, "blob_store", None)
    if store is None:
        raise StorageError("Blob storage is not configured")
    return store


__all__ = ["BlobStore", "StoredBlob", "build_blob_store", "get_blob_store"]
