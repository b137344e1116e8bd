"""
IdeaBoard Backend — JSON Idea Store
=====================================

What:  Durable representation of the full idea collection as one file (ideas.json).
How:   Every read loads and validates the whole JSON array; every write
       serializes the whole collection to a temporary sibling file and renames
       it over ideas.json.
Who:   Used by IdeaService; exposed to routes through the get_store dependency.
When:  Constructed once per application from Settings.data_dir.

Contract:
    load_all()      → list of ideas sorted by votes (descending, stable).
                      Missing, unreadable or invalid file → empty list, never an error.
    save_all(ideas) → full replacement of ideas.json. Readers see either the old
                      or the new file, never a partial one. Raises StoreError.
    append(idea)    → load_all + push + save_all.

Concurrency:
    There is no lock. Two overlapping read-modify-write cycles both load the
    same collection and the later save_all replaces the earlier one entirely
    (last write wins on the whole collection).
"""

import logging
import uuid
from pathlib import Path
from typing import List, Sequence, Union

import aiofiles
import aiofiles.os
from fastapi import Request
from pydantic import TypeAdapter

from ideaboard.config import IDEAS_FILENAME
from ideaboard.exceptions import StoreError
from ideaboard.schemas.idea import Idea

logger = logging.getLogger(__name__)

# Validator/serializer for the persisted JSON array
_collection_adapter = TypeAdapter(List[Idea])


class IdeaStore:
    """
    Load-all / save-all persistence for the idea collection.

    Attributes:
        data_dir: Directory holding ideas.json
        path:     Full path of ideas.json
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.path = self.data_dir / IDEAS_FILENAME

    def ensure_directories(self) -> None:
        """Create the data directory (called once at startup)."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    async def load_all(self) -> List[Idea]:
        """
        Read the whole collection, sorted by votes descending.

        Ties keep the order in which ideas appear in the file (sorted() is stable).

        Returns:
            List of Idea records; empty when ideas.json is absent, unreadable,
            not JSON, or does not match the Idea schema.
        """
        try:
            async with aiofiles.open(self.path, "rb") as f:
                raw = await f.read()
            ideas = _collection_adapter.validate_json(raw)
        except FileNotFoundError:
            logger.debug("No idea file at %s yet; starting empty", self.path)
            return []
        except (OSError, ValueError) as e:
            # pydantic.ValidationError is a ValueError: bad JSON or bad records
            logger.warning("Could not load ideas from %s, treating as empty: %s", self.path, e)
            return []

        return sorted(ideas, key=lambda idea: idea.votes, reverse=True)

    async def save_all(self, ideas: Sequence[Idea]) -> None:
        """
        Replace ideas.json with the given collection.

        How:
            1. Serialize to camelCase JSON (indent=2)
            2. Write to .ideas.json.<hex>.tmp next to the target
            3. Rename the temporary file over ideas.json

        Raises:
            StoreError if any step fails. The temporary file is removed and
            the previous ideas.json is left untouched.
        """
        payload = _collection_adapter.dump_json(list(ideas), by_alias=True, indent=2)
        tmp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "wb") as f:
                await f.write(payload)
            await aiofiles.os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Failed to save ideas to %s: %s", self.path, str(e))
            await self._discard(tmp_path)
            raise StoreError(
                context={"path": str(self.path), "os_error": str(e)},
            ) from e

        logger.debug("Saved %d ideas to %s (%d bytes)", len(ideas), self.path, len(payload))

    async def append(self, idea: Idea) -> None:
        """Add one idea to the persisted collection."""
        ideas = await self.load_all()
        ideas.append(idea)
        await self.save_all(ideas)

    async def _discard(self, tmp_path: Path) -> None:
        """Best-effort removal of a leftover temporary file."""
        try:
            await aiofiles.os.remove(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove temporary file %s: %s", tmp_path, str(e))


def get_store(request: Request) -> IdeaStore:
    """
    FastAPI dependency returning the application's IdeaStore.

    Usage:
        @router.get("/api/ideas")
        async def list_ideas(store: IdeaStore = Depends(get_store)): ...
    """
    return request.app.state.store
