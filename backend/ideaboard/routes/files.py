"""
IdeaBoard Backend — Attachment Download Route
===============================================

What:  Serves uploaded attachments by stored name (GET /uploads/{file_name}).
Who:   Attachment links rendered by the browser client.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from ideaboard.schemas.idea import ErrorResponse
from ideaboard.services.file_service import FileService, get_file_service

router = APIRouter(tags=["Files"])


@router.get(
    "/uploads/{file_name}",
    summary="Download an attachment",
    responses={
        200: {"description": "Raw attachment bytes"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(
    file_name: str,
    file_service: FileService = Depends(get_file_service),
) -> FileResponse:
    """
    Return the stored bytes; the media type is guessed from the filename.

    Unknown names and names resolving outside uploads/ both give 404.
    """
    path = file_service.resolve(file_name)
    return FileResponse(path=str(path))
