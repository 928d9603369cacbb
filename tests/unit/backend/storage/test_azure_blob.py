"""Unit tests for the Azure blob store with a mocked SDK client."""

import io
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import AzureError, ResourceExistsError, ResourceNotFoundError

from notekeep.backend.core.exceptions import NotFoundError, StorageError
from notekeep.backend.storage.azure_blob import AzureBlobStore, account_url

OWNER = "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def container():
    return MagicMock()


@pytest.fixture
def store(container):
    service_client = MagicMock()
    service_client.get_container_client.return_value = container
    return AzureBlobStore("acct", "key", "notekeep", service_client=service_client)


class TestConstruction:

    def test_account_url(self):
        assert account_url("acct") == "https://acct.blob.core.windows.net"

    def test_requires_credentials_without_client(self):
        with pytest.raises(StorageError, match="account name and key"):
            AzureBlobStore("", "", "notekeep")

    def test_uses_named_container(self, store):
        store._service.get_container_client.assert_called_once_with("notekeep")
        assert store.backend_name == "azure"


class TestEnsureReady:

    async def test_creates_container(self, store, container):
        await store.ensure_ready()
        container.create_container.assert_called_once()

    async def test_existing_container_is_fine(self, store, container):
        container.create_container.side_effect = ResourceExistsError("exists")
        await store.ensure_ready()

    async def test_other_failure_raises(self, store, container):
        container.create_container.side_effect = AzureError("denied")
        with pytest.raises(StorageError, match="notekeep"):
            await store.ensure_ready()


class TestBlobOperations:

    async def test_upload_under_owner_prefix(self, store, container):
        container.upload_blob.return_value = SimpleNamespace(
            url=f"https://acct.blob.core.windows.net/notekeep/user-{OWNER}/a.txt"
        )

        blob = await store.upload_file(OWNER, "a.txt", io.BytesIO(b"x"), "text/plain")

        args, kwargs = container.upload_blob.call_args
        assert args[0] == f"user-{OWNER}/a.txt"
        assert kwargs["overwrite"] is True
        assert kwargs["content_settings"].content_type == "text/plain"
        assert blob.filename == "a.txt"
        assert blob.url.endswith(f"user-{OWNER}/a.txt")

    async def test_upload_failure(self, store, container):
        container.upload_blob.side_effect = AzureError("boom")
        with pytest.raises(StorageError, match="Failed to upload 'a.txt'"):
            await store.upload_file(OWNER, "a.txt", io.BytesIO(b"x"))

    async def test_list_strips_prefix(self, store, container):
        container.list_blobs.return_value = [
            SimpleNamespace(name=f"user-{OWNER}/a.txt"),
            SimpleNamespace(name=f"user-{OWNER}/b.png"),
        ]

        assert await store.list_files(OWNER) == ["a.txt", "b.png"]
        container.list_blobs.assert_called_once_with(name_starts_with=f"user-{OWNER}/")

    async def test_list_failure(self, store, container):
        container.list_blobs.side_effect = AzureError("boom")
        with pytest.raises(StorageError):
            await store.list_files(OWNER)

    async def test_delete(self, store, container):
        await store.delete_file(OWNER, "a.txt")
        container.delete_blob.assert_called_once_with(f"user-{OWNER}/a.txt")

    async def test_delete_missing_blob(self, store, container):
        container.delete_blob.side_effect = ResourceNotFoundError("gone")
        with pytest.raises(NotFoundError):
            await store.delete_file(OWNER, "a.txt")

    async def test_aclose_closes_client(self, store):
        await store.aclose()
        store._service.close.assert_called_once()
