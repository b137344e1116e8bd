"""
IdeaBoard Backend — Idea Service (Business Logic)
===================================================

What:  The state-changing operations of the idea board: create an idea,
       register a vote, append a note. Plus the sorted listing.
How:   Each operation is one read-modify-write cycle against IdeaStore:
       load the whole collection → mutate exactly one idea → save the whole
       collection. Nothing is cached between calls.
Who:   Called by the /api/ideas route handlers.

Operation Flow (POST /api/ideas/{id}/vote):
    ┌──────────┐    ┌─────────────┐    ┌─────────────┐    ┌─────────────┐
    │  Route   │───▶│  load_all   │───▶│  votes += 1 │───▶│  save_all   │
    └──────────┘    └─────────────┘    └─────────────┘    └─────────────┘

Failure semantics:
    - Unknown id → NotFoundError, nothing is written
    - save_all fails → StoreError propagates; the in-memory change is
      dropped and ideas.json keeps its previous contents
    - Vote and note do not re-sort what they save; ordering is applied on read
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from fastapi import Depends

from ideaboard.exceptions import NotFoundError, ValidationError
from ideaboard.schemas.idea import Attachment, Idea, Note
from ideaboard.store import IdeaStore, get_store

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(timezone.utc)


class IdeaService:
    """
    Business logic layer for idea operations.

    Responsibilities:
        - list_ideas():    Whole collection, most-voted first
        - create_idea():   Validate title, build the record, append it
        - register_vote(): Increment one idea's vote counter
        - add_note():      Append one note to one idea
    """

    def __init__(self, store: IdeaStore):
        self.store = store

    async def list_ideas(self) -> List[Idea]:
        return await self.store.load_all()

    async def create_idea(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        attachments: Optional[Sequence[Attachment]] = None,
    ) -> Idea:
        """
        Create and persist a new idea.

        Args:
            title: Required, must contain non-whitespace characters
            description: Optional, defaults to ""
            attachments: Files already written by FileService (zero or more)

        Returns:
            The new Idea (votes=0, no notes)

        Raises:
            ValidationError: title absent or blank (collection untouched)
            StoreError: the collection could not be saved
        """
        if title is None or not title.strip():
            raise ValidationError(message="Title is required", field="title")

        idea = Idea(
            id=_new_id(),
            title=title,
            description=description or "",
            votes=0,
            notes=[],
            files=list(attachments or []),
            created_at=_now(),
        )
        await self.store.append(idea)

        logger.info("Idea created: %s (%d attachments)", idea.id, len(idea.files))
        return idea

    async def register_vote(self, idea_id: str) -> Idea:
        """
        Add one vote to an idea.

        Raises:
            NotFoundError: no idea with this id
            StoreError: the collection could not be saved
        """
        ideas = await self.store.load_all()
        idea = self._find(ideas, idea_id)

        idea.votes += 1
        await self.store.save_all(ideas)

        logger.info("Vote registered: %s now has %d votes", idea.id, idea.votes)
        return idea

    async def add_note(self, idea_id: str, text: Optional[str]) -> Note:
        """
        Append a note to an idea.

        Returns:
            The new Note (not the whole idea)

        Raises:
            ValidationError: text absent or blank
            NotFoundError: no idea with this id
            StoreError: the collection could not be saved
        """
        if text is None or not text.strip():
            raise ValidationError(message="Note text is required", field="note")

        ideas = await self.store.load_all()
        idea = self._find(ideas, idea_id)

        note = Note(id=_new_id(), text=text, created_at=_now())
        idea.notes.append(note)
        await self.store.save_all(ideas)

        logger.info("Note %s added to idea %s (%d notes)", note.id, idea.id, len(idea.notes))
        return note

    @staticmethod
    def _find(ideas: List[Idea], idea_id: str) -> Idea:
        for idea in ideas:
            if idea.id == idea_id:
                return idea
        raise NotFoundError(resource="Idea", resource_id=idea_id)


def get_idea_service(store: IdeaStore = Depends(get_store)) -> IdeaService:
    """FastAPI dependency: an IdeaService bound to the application's store."""
    return IdeaService(store)
