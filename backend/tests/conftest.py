"""
IdeaBoard Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Every test gets its own temporary data directory; nothing touches ./data.

Fixture Hierarchy (all function-scoped):
    test_settings ─┬─ store ── idea_service
                   ├─ file_service
                   └─ test_app ── test_client (HTTPX AsyncClient)
    make_idea: factory for Idea records with chosen id / votes
"""

import os
import tempfile

# Settings are read at import time; point the default app somewhere harmless
os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="ideaboard_test_")
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from ideaboard.config import Settings  # noqa: E402
from ideaboard.schemas.idea import Idea  # noqa: E402
from ideaboard.services.file_service import FileService  # noqa: E402
from ideaboard.services.idea_service import IdeaService  # noqa: E402
from ideaboard.store import IdeaStore  # noqa: E402


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Settings rooted in a fresh temporary directory."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        max_file_size=64 * 1024,
        rate_limit_requests=1000,
        log_level="WARNING",
    )


@pytest.fixture
def store(test_settings) -> IdeaStore:
    idea_store = IdeaStore(test_settings.data_dir)
    idea_store.ensure_directories()
    return idea_store


@pytest.fixture
def idea_service(store) -> IdeaService:
    return IdeaService(store)


@pytest.fixture
def file_service(test_settings) -> FileService:
    service = FileService(
        uploads_dir=test_settings.uploads_dir,
        max_file_size=test_settings.max_file_size,
    )
    service.ensure_directory()
    return service


@pytest.fixture
def make_idea():
    """
    Factory for Idea records.

    Usage:
        idea = make_idea("test-id", votes=5)
    """
    def _make(idea_id: str, votes: int = 0, title: str = None, **fields) -> Idea:
        return Idea(
            id=idea_id,
            title=title or f"Idea {idea_id}",
            votes=votes,
            created_at=fields.pop("created_at", datetime(2023, 1, 1, tzinfo=timezone.utc)),
            **fields,
        )
    return _make


@pytest.fixture
def test_app(test_settings):
    """
    FastAPI app wired to the temporary data directory.

    ASGITransport does not run the lifespan, so directories are created here.
    """
    from ideaboard.main import create_app

    app = create_app(test_settings)
    app.state.store.ensure_directories()
    app.state.file_service.ensure_directory()
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Async HTTP client talking to test_app in-process.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/ideas")
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
