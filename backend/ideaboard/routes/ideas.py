"""
IdeaBoard Backend — Idea Route Handlers
=========================================

What:  REST endpoints for listing, creating, voting on and annotating ideas.
How:   Extracts form / JSON / path input, delegates to IdeaService, returns
       the affected record. Errors propagate to the global exception handlers.
Who:   Called by the browser client (static/script.js).

Endpoints:
    GET  /api/ideas                  → 200, ideas sorted by votes desc
    POST /api/ideas                  → 201, created idea (multipart form)
    POST /api/ideas/{idea_id}/vote   → 200, updated idea
    POST /api/ideas/{idea_id}/notes  → 200, created note
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ideaboard.schemas.idea import Attachment, ErrorResponse, Idea, Note, NoteCreate
from ideaboard.services.file_service import FileService, get_file_service
from ideaboard.services.idea_service import IdeaService, get_idea_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Ideas"])


@router.get(
    "/ideas",
    response_model=List[Idea],
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List all ideas",
    description="Returns every idea, most-voted first.",
)
async def list_ideas(
    service: IdeaService = Depends(get_idea_service),
) -> List[Idea]:
    return await service.list_ideas()


@router.post(
    "/ideas",
    status_code=201,
    response_model=Idea,
    responses={
        201: {"description": "Idea created", "model": Idea},
        500: {"description": "Missing title or persistence failure", "model": ErrorResponse},
    },
    summary="Submit a new idea",
    description=(
        "Multipart form with a required `title`, an optional `description` and "
        "zero or more `files` attachments."
    ),
)
async def create_idea(
    title: Optional[str] = Form(default=None, description="Idea title (required)"),
    description: Optional[str] = Form(default=None, description="Optional description"),
    files: Optional[List[UploadFile]] = File(default=None, description="Attachments"),
    service: IdeaService = Depends(get_idea_service),
    file_service: FileService = Depends(get_file_service),
) -> Idea:
    """
    Create an idea with optional attachments.

    Processing Steps:
        1. Write each uploaded file to the uploads directory
        2. Delegate to IdeaService.create_idea() with the resulting attachments
        3. On any failure: remove the files written in step 1, re-raise
    """
    uploads = [upload for upload in (files or []) if upload.filename]
    stored: List[Attachment] = []

    try:
        for upload in uploads:
            content = await upload.read()
            attachment = await file_service.store_upload(
                filename=upload.filename,
                content=content,
                content_length=upload.size,
            )
            stored.append(attachment)

        return await service.create_idea(
            title=title,
            description=description,
            attachments=stored,
        )

    except Exception:
        for attachment in stored:
            await file_service.cleanup_file(attachment.stored_name)
        raise
    finally:
        for upload in files or []:
            await upload.close()


@router.post(
    "/ideas/{idea_id}/vote",
    response_model=Idea,
    responses={
        404: {"description": "Idea not found", "model": ErrorResponse},
        500: {"description": "Persistence failure", "model": ErrorResponse},
    },
    summary="Vote for an idea",
)
async def vote_idea(
    idea_id: str,
    service: IdeaService = Depends(get_idea_service),
) -> Idea:
    return await service.register_vote(idea_id)


@router.post(
    "/ideas/{idea_id}/notes",
    response_model=Note,
    responses={
        404: {"description": "Idea not found", "model": ErrorResponse},
        500: {"description": "Missing note text or persistence failure", "model": ErrorResponse},
    },
    summary="Add a note to an idea",
    description="JSON body `{\"note\": \"...\"}`. Returns the created note.",
)
async def add_note(
    idea_id: str,
    payload: NoteCreate,
    service: IdeaService = Depends(get_idea_service),
) -> Note:
    return await service.add_note(idea_id, payload.note)
