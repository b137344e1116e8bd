"""
IdeaBoard Backend — Pydantic Record & Response Schemas
=======================================================

What:  Pydantic models for ideas, notes and attachments, plus API envelopes.
How:   The same models are the API contract (FastAPI response_model) and the
       persisted format of ideas.json (IdeaStore). Attributes are snake_case in
       Python and camelCase on the wire (createdAt, storedName, originalName).
Who:   Built by IdeaService and FileService, validated by IdeaStore on load.

Persisted record example:
    {
        "id": "3f0c...",
        "title": "Dark mode",
        "description": "",
        "votes": 3,
        "notes": [{"id": "9a1e...", "text": "+1", "createdAt": "2024-01-15T12:00:00Z"}],
        "files": [{"storedName": "5d2b...-mock.png", "originalName": "mock.png", "size": 2048}],
        "createdAt": "2024-01-15T11:58:02Z"
    }
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RecordModel(BaseModel):
    """Base for persisted records: camelCase aliases, population by field name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Records — what ideas.json holds and the API returns
# ══════════════════════════════════════════════════════════════════════════


class Attachment(RecordModel):
    """
    What:  Reference to an uploaded file, fixed at idea creation.
    Who:   Built by FileService.store_upload(); served back via GET /uploads/{stored_name}.
    """
    stored_name: str = Field(description="Server-generated unique filename under uploads/")
    original_name: str = Field(description="Client-supplied display name")
    size: int = Field(ge=0, description="Size in bytes")


class Note(RecordModel):
    """Immutable timestamped comment appended to an idea."""
    id: str = Field(description="Unique note identifier")
    text: str = Field(description="Note text")
    created_at: datetime = Field(description="When the note was added (UTC)")


class Idea(RecordModel):
    """
    What:  A proposed item with a title, votes, notes and attachments.

    Mutability:
        - votes: only ever incremented by one (IdeaService.register_vote)
        - notes: append-only (IdeaService.add_note)
        - everything else is fixed at creation
    """
    id: str = Field(description="Unique idea identifier")
    title: str = Field(description="Idea title")
    description: str = Field(default="", description="Optional longer description")
    votes: int = Field(default=0, ge=0, description="Vote counter")
    notes: List[Note] = Field(default_factory=list, description="Notes in insertion order")
    files: List[Attachment] = Field(default_factory=list, description="Attachments")
    created_at: datetime = Field(description="When the idea was created (UTC)")


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/ideas/{id}/notes.

    `note` is optional at the schema level so that a missing value reaches
    IdeaService and is reported like every other missing input.
    """
    note: Optional[str] = Field(default=None, description="Note text")


# ══════════════════════════════════════════════════════════════════════════
# Error & Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "Idea with ID 'abc' was not found",
            "request_id": "1f2e3d4c"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and storage status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    storage: str = Field(description="Data directory status: writable, unwritable")
    idea_count: int = Field(description="Number of ideas currently persisted")
    uptime_seconds: float = Field(description="Seconds since service started")
