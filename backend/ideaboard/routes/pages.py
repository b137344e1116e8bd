"""
IdeaBoard Backend — Landing Page Route
========================================

What:  Serves the single-page browser client at GET /.
How:   index.html is returned as-is; its script and stylesheet are served by
       the StaticFiles mount at /static (see main.create_app).
"""

from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

STATIC_DIR = Path(__file__).resolve().parent.parent / "static"

router = APIRouter(tags=["Pages"])


@router.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(path=str(STATIC_DIR / "index.html"), media_type="text/html")
