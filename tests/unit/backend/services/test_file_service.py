"""
Unit Tests for File Service.

The blob store is mocked; only filename and size rules are exercised here.
"""

import io
from unittest.mock import AsyncMock

import pytest

from notekeep.backend.core.exceptions import NotFoundError, ValidationError
from notekeep.backend.services.file import FileService
from notekeep.backend.storage.base import StoredBlob


@pytest.fixture
def store():
    store = AsyncMock()
    store.upload_file.return_value = StoredBlob("a.txt", "https://blob/a.txt", "text/plain")
    store.list_files.return_value = ["a.txt"]
    return store


class TestUpload:

    async def test_stores_in_callers_folder(self, store, caller):
        service = FileService(store, max_upload_bytes=100)

        blob = await service.upload(caller, "a.txt", io.BytesIO(b"hi"), "text/plain", size=2)

        store.upload_file.assert_awaited_once()
        assert store.upload_file.await_args.args[:2] == (caller.id, "a.txt")
        assert blob.url == "https://blob/a.txt"

    async def test_rejects_oversized_file(self, store, caller):
        service = FileService(store, max_upload_bytes=10)

        with pytest.raises(ValidationError, match="File too large") as exc_info:
            await service.upload(caller, "a.txt", io.BytesIO(b"x" * 11), size=11)

        assert exc_info.value.details == {"size": 11, "max_bytes": 10}
        store.upload_file.assert_not_awaited()

    async def test_unknown_size_is_not_checked(self, store, caller):
        service = FileService(store, max_upload_bytes=1)
        await service.upload(caller, "a.txt", io.BytesIO(b"abc"))
        store.upload_file.assert_awaited_once()

    @pytest.mark.parametrize("filename", [None, "", "  ", "../etc/passwd", "dir/a.txt", "..\\a"])
    async def test_rejects_bad_filenames(self, store, caller, filename):
        service = FileService(store)

        with pytest.raises(ValidationError):
            await service.upload(caller, filename, io.BytesIO(b"x"))

        store.upload_file.assert_not_awaited()


class TestListAndDelete:

    async def test_lists_callers_files(self, store, caller):
        assert await FileService(store).list_files(caller) == ["a.txt"]
        store.list_files.assert_awaited_once_with(caller.id)

    async def test_delete_scoped_to_caller(self, store, caller):
        await FileService(store).delete(caller, "a.txt")
        store.delete_file.assert_awaited_once_with(caller.id, "a.txt")

    async def test_delete_missing_file_propagates(self, store, caller):
        store.delete_file.side_effect = NotFoundError("File not found")

        with pytest.raises(NotFoundError):
            await FileService(store).delete(caller, "gone.txt")

    async def test_delete_rejects_path_traversal(self, store, caller):
        with pytest.raises(ValidationError):
            await FileService(store).delete(caller, "../other/a.txt")

        store.delete_file.assert_not_awaited()
