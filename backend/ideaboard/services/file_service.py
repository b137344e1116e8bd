"""
IdeaBoard Backend — Attachment Storage Service
================================================

What:  Writes uploaded attachment bytes to disk, serves them back, and removes
       blobs orphaned by a failed idea creation.
How:   Each upload is stored flat under <data_dir>/uploads with a unique name
       "<uuid4>-<original basename>" and described by an Attachment record.
Who:   Called by the POST /api/ideas and GET /uploads/{file} routes.
When:  Uploads are written before IdeaService sees the attachment list.

Directory Structure:
    data/uploads/
    ├── 5d2b6c1e-...-mockup.png
    └── 0a9f77d3-...-notes.txt

Safety:
    - Directory components of the client filename are dropped
    - Resolved download paths must stay inside the uploads directory
    - Size limit (MAX_FILE_SIZE) is checked before anything is written
"""

import logging
import uuid
from pathlib import Path
from typing import Optional, Union

import aiofiles
import aiofiles.os
from fastapi import Request

from ideaboard.exceptions import FileStorageError, NotFoundError, ValidationError
from ideaboard.schemas.idea import Attachment

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "upload"


class FileService:
    """
    Manages the lifecycle of uploaded attachment blobs.

    Lifecycle of an uploaded file:
        1. Route reads the multipart part → FileService.store_upload()
        2. Size check against the configured limit
        3. Bytes written to uploads/<uuid>-<name>
        4. Attachment returned and handed to IdeaService.create_idea()
        5. If creating the idea fails: cleanup_file() removes the blob
    """

    def __init__(self, uploads_dir: Union[str, Path], max_file_size: int):
        self.uploads_dir = Path(uploads_dir).resolve()
        self.max_file_size = max_file_size

    def ensure_directory(self) -> None:
        """Create the uploads directory (called once at startup)."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def sanitize_filename(filename: Optional[str]) -> str:
        """
        Reduce a client-supplied filename to its final path component.

        Examples:
            "report.pdf"            → "report.pdf"
            "../../etc/passwd"      → "passwd"
            "C:\\Users\\me\\a.png"  → "a.png"
            ""                      → "upload"
        """
        if not filename:
            return DEFAULT_FILENAME
        name = Path(filename.replace("\\", "/")).name.strip()
        if name in ("", ".", ".."):
            return DEFAULT_FILENAME
        return name

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate upload size against the configured maximum.

        Args:
            content_length: Size reported by the client (may be None or inaccurate)
            actual_size: Actual byte count of the uploaded file

        Raises:
            ValidationError with a human-readable size limit message
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.1f}MB.",
                field="files",
                context={"max_size": self.max_file_size, "reported_size": content_length},
            )

        if actual_size > self.max_file_size:
            raise ValidationError(
                message=(
                    f"File size ({actual_size / (1024 * 1024):.1f}MB) "
                    f"exceeds maximum of {max_mb:.1f}MB."
                ),
                field="files",
                context={"max_size": self.max_file_size, "actual_size": actual_size},
            )

    async def store_upload(
        self,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> Attachment:
        """
        Validate and write one uploaded file.

        Returns:
            Attachment with the generated stored name, the sanitized original
            name and the byte count.

        Raises:
            ValidationError: file exceeds the size limit
            FileStorageError: directory creation or write failed
        """
        original_name = self.sanitize_filename(filename)
        self.validate_size(content_length, len(content))

        stored_name = f"{uuid.uuid4()}-{original_name}"
        path = self.uploads_dir / stored_name

        try:
            self.uploads_dir.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(path), "os_error": str(e)},
            ) from e

        logger.info("Attachment stored: %s (%d bytes)", stored_name, len(content))
        return Attachment(
            stored_name=stored_name,
            original_name=original_name,
            size=len(content),
        )

    async def cleanup_file(self, stored_name: str) -> None:
        """
        Remove a stored blob (used after a failed idea creation).

        Missing files are ignored; other failures are logged, never raised.
        """
        path = self.uploads_dir / stored_name
        try:
            await aiofiles.os.remove(path)
            logger.info("Cleaned up file: %s", stored_name)
        except FileNotFoundError:
            logger.debug("Cleanup: file already gone: %s", stored_name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", stored_name, str(e))

    def resolve(self, stored_name: str) -> Path:
        """
        Map a stored name from a URL to a file inside the uploads directory.

        Raises:
            NotFoundError if the file does not exist or the name points
            outside the uploads directory.
        """
        path = (self.uploads_dir / stored_name).resolve()
        if path.parent != self.uploads_dir or not path.is_file():
            raise NotFoundError(resource="file", resource_id=stored_name)
        return path


def get_file_service(request: Request) -> FileService:
    """FastAPI dependency returning the application's FileService."""
    return request.app.state.file_service
