"""
IdeaBoard Backend — File Service Unit Tests
=============================================

What:  Tests for FileService filename sanitizing, size limits, storage,
       download lookup and cleanup.
How:   Uses a temporary uploads directory (no HTTP involved).
"""

from unittest.mock import patch

import pytest

from ideaboard.exceptions import FileStorageError, NotFoundError, ValidationError
from ideaboard.services.file_service import FileService


class TestFilenameSanitizing:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("report.pdf", "report.pdf"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\mock.png", "mock.png"),
            ("", "upload"),
            (None, "upload"),
            ("..", "upload"),
        ],
    )
    def test_sanitize_filename(self, raw, expected):
        assert FileService.sanitize_filename(raw) == expected


class TestSizeValidation:

    def setup_method(self):
        self.service = FileService(uploads_dir="/tmp/unused", max_file_size=1024)

    def test_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_at_limit(self):
        self.service.validate_size(1024, 1024)

    def test_empty_file_allowed(self):
        self.service.validate_size(0, 0)

    def test_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(None, 1025)

    def test_reported_length_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds maximum"):
            self.service.validate_size(4096, 10)


class TestStoreUpload:

    @pytest.mark.asyncio
    async def test_writes_bytes_with_unique_name(self, file_service):
        attachment = await file_service.store_upload("mock.png", b"\x89PNG data")

        assert attachment.original_name == "mock.png"
        assert attachment.size == 9
        assert attachment.stored_name.endswith("-mock.png")
        assert attachment.stored_name != "mock.png"
        stored = file_service.uploads_dir / attachment.stored_name
        assert stored.read_bytes() == b"\x89PNG data"

    @pytest.mark.asyncio
    async def test_zero_byte_file_is_stored(self, file_service):
        attachment = await file_service.store_upload("empty.txt", b"")

        assert attachment.size == 0
        assert (file_service.uploads_dir / attachment.stored_name).read_bytes() == b""

    @pytest.mark.asyncio
    async def test_same_name_twice_gives_two_files(self, file_service):
        first = await file_service.store_upload("same.txt", b"1")
        second = await file_service.store_upload("same.txt", b"2")

        assert first.stored_name != second.stored_name
        assert len(list(file_service.uploads_dir.iterdir())) == 2

    @pytest.mark.asyncio
    async def test_path_components_are_dropped(self, file_service):
        attachment = await file_service.store_upload("../../evil.sh", b"#!/bin/sh")

        assert attachment.original_name == "evil.sh"
        assert (file_service.uploads_dir / attachment.stored_name).exists()

    @pytest.mark.asyncio
    async def test_oversized_upload_is_not_written(self, tmp_path):
        service = FileService(uploads_dir=tmp_path / "uploads", max_file_size=4)
        service.ensure_directory()

        with pytest.raises(ValidationError):
            await service.store_upload("big.bin", b"12345")

        assert list(service.uploads_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_write_failure_raises_file_storage_error(self, file_service):
        with patch("aiofiles.open", side_effect=PermissionError("read-only")):
            with pytest.raises(FileStorageError):
                await file_service.store_upload("a.txt", b"abc")


class TestResolveAndCleanup:

    @pytest.mark.asyncio
    async def test_resolve_existing(self, file_service):
        attachment = await file_service.store_upload("a.txt", b"abc")

        path = file_service.resolve(attachment.stored_name)

        assert path.read_bytes() == b"abc"

    def test_resolve_missing(self, file_service):
        with pytest.raises(NotFoundError):
            file_service.resolve("nope.txt")

    def test_resolve_outside_uploads(self, file_service, store):
        store.path.write_text("[]", encoding="utf-8")
        with pytest.raises(NotFoundError):
            file_service.resolve("../ideas.json")

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, file_service):
        attachment = await file_service.store_upload("a.txt", b"abc")

        await file_service.cleanup_file(attachment.stored_name)

        assert not (file_service.uploads_dir / attachment.stored_name).exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, file_service):
        # Should not raise
        await file_service.cleanup_file("nonexistent.jpg")
