"""
IdeaBoard Backend — Server Entry Point
========================================

Usage:
    python -m ideaboard          # or the `ideaboard` console script
    DATA_DIR=/srv/ideas PORT=8080 ideaboard
"""

import uvicorn

from ideaboard.config import settings


def main() -> None:
    uvicorn.run(
        "ideaboard.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
