"""
IdeaBoard Backend — Idea Store Unit Tests
===========================================

What:  Tests for IdeaStore load/save/append against a temporary directory.

What we test:
    ✅ Missing, corrupt and schema-invalid files load as an empty collection
    ✅ load_all sorts by votes descending, ties keep file order
    ✅ save_all → load_all round trip (modulo sort order)
    ✅ camelCase keys on disk
    ✅ Failed save keeps the previous file and leaves no temporary file
"""

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from ideaboard.exceptions import StoreError
from ideaboard.store import IdeaStore


class TestLoadAll:
    """Tests for reading the collection."""

    @pytest.mark.asyncio
    async def test_missing_file_returns_empty(self, store):
        assert not store.path.exists()
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_missing_directory_returns_empty(self, tmp_path):
        store = IdeaStore(tmp_path / "does-not-exist")
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_corrupt_json_returns_empty(self, store):
        store.path.write_text("{not json", encoding="utf-8")
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_empty_file_returns_empty(self, store):
        store.path.write_bytes(b"")
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_non_array_returns_empty(self, store):
        store.path.write_text('{"id": "1"}', encoding="utf-8")
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_schema_invalid_record_returns_empty(self, store):
        """A record with a negative vote count fails validation."""
        records = [
            {"id": "1", "title": "Fine", "votes": 1, "createdAt": "2023-01-01T00:00:00Z"},
            {"id": "2", "title": "Broken", "votes": -3, "createdAt": "2023-01-01T00:00:00Z"},
        ]
        store.path.write_text(json.dumps(records), encoding="utf-8")
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_parses_camel_case_records(self, store):
        records = [
            {
                "id": "1",
                "title": "With everything",
                "description": "desc",
                "votes": 2,
                "notes": [{"id": "n1", "text": "hi", "createdAt": "2023-01-02T00:00:00Z"}],
                "files": [{"storedName": "abc-a.png", "originalName": "a.png", "size": 10}],
                "createdAt": "2023-01-01T00:00:00Z",
            }
        ]
        store.path.write_text(json.dumps(records), encoding="utf-8")

        ideas = await store.load_all()

        assert len(ideas) == 1
        assert ideas[0].notes[0].text == "hi"
        assert ideas[0].files[0].stored_name == "abc-a.png"
        assert ideas[0].files[0].original_name == "a.png"

    @pytest.mark.asyncio
    async def test_sorted_by_votes_descending(self, store, make_idea):
        await store.save_all([
            make_idea("1", votes=5),
            make_idea("2", votes=10),
            make_idea("3", votes=2),
        ])

        ideas = await store.load_all()

        assert [idea.id for idea in ideas] == ["2", "1", "3"]

    @pytest.mark.asyncio
    async def test_ties_keep_file_order(self, store, make_idea):
        await store.save_all([
            make_idea("a", votes=1),
            make_idea("b", votes=3),
            make_idea("c", votes=1),
            make_idea("d", votes=1),
        ])

        ideas = await store.load_all()

        assert [idea.id for idea in ideas] == ["b", "a", "c", "d"]


class TestSaveAll:
    """Tests for writing the collection."""

    @pytest.mark.asyncio
    async def test_round_trip_is_set_equal(self, store, make_idea):
        original = [make_idea("x", votes=0), make_idea("y", votes=7), make_idea("z", votes=3)]
        await store.save_all(original)

        loaded = await store.load_all()

        assert sorted(loaded, key=lambda i: i.id) == sorted(original, key=lambda i: i.id)

    @pytest.mark.asyncio
    async def test_writes_in_given_order_with_camel_case_keys(self, store, make_idea):
        await store.save_all([make_idea("1", votes=2), make_idea("2", votes=8)])

        saved = json.loads(store.path.read_text(encoding="utf-8"))

        assert [record["id"] for record in saved] == ["1", "2"]
        assert "createdAt" in saved[0]
        assert "created_at" not in saved[0]

    @pytest.mark.asyncio
    async def test_replaces_previous_contents(self, store, make_idea):
        await store.save_all([make_idea("old")])
        await store.save_all([make_idea("new")])

        assert [idea.id for idea in await store.load_all()] == ["new"]

    @pytest.mark.asyncio
    async def test_creates_missing_data_directory(self, tmp_path, make_idea):
        store = IdeaStore(tmp_path / "nested" / "data")
        await store.save_all([make_idea("1")])
        assert store.path.exists()

    @pytest.mark.asyncio
    async def test_failed_replace_keeps_previous_file(self, store, make_idea):
        await store.save_all([make_idea("1", votes=1)])
        before = store.path.read_bytes()

        with patch("aiofiles.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StoreError):
                await store.save_all([make_idea("1", votes=2)])

        assert store.path.read_bytes() == before
        assert sorted(p.name for p in store.data_dir.iterdir()) == ["ideas.json"]

    @pytest.mark.asyncio
    async def test_failed_write_raises_store_error(self, store, make_idea):
        with patch("aiofiles.open", side_effect=PermissionError("read-only")):
            with pytest.raises(StoreError) as exc_info:
                await store.save_all([make_idea("1")])

        assert exc_info.value.context["path"] == str(store.path)
        assert not store.path.exists()


class TestAppend:

    @pytest.mark.asyncio
    async def test_append_adds_to_existing(self, store, make_idea):
        await store.save_all([make_idea("1", votes=1)])

        await store.append(make_idea("2", votes=0))

        ideas = await store.load_all()
        assert len(ideas) == 2
        assert any(idea.id == "2" for idea in ideas)

    @pytest.mark.asyncio
    async def test_append_to_missing_file(self, store, make_idea):
        await store.append(make_idea("only"))
        assert [idea.id for idea in await store.load_all()] == ["only"]


class TestLayout:

    def test_ideas_and_uploads_share_the_data_directory(self, test_settings, store, file_service):
        data_dir = Path(test_settings.data_dir).resolve()
        assert store.path.resolve() == data_dir / "ideas.json"
        assert file_service.uploads_dir == data_dir / "uploads"
