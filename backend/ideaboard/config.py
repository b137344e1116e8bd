"""
IdeaBoard Backend — Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Passed into the store and file service when the app is built.
When:  Loaded once at module import time; tests build their own instances.

Storage layout under DATA_DIR:
    data/
    ├── ideas.json        ← the whole idea collection (one JSON array)
    └── uploads/
        └── <uuid>-<original name>
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

IDEAS_FILENAME = "ideas.json"
UPLOADS_DIRNAME = "uploads"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have defaults suitable for running locally;
    DATA_DIR and PORT are the two a deployment normally overrides.
    """

    # ── Storage ───────────────────────────────────────────────────────────
    # Root for the JSON artifact and the uploads subdirectory
    data_dir: str = Field(default="./data", description="Root data directory")

    # Per-upload limit in bytes (default 10MB)
    max_file_size: int = Field(default=10_485_760, ge=1, le=524_288_000)

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Valid: DEBUG, INFO, WARNING, ERROR, CRITICAL
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list of origins
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Write Throttling ──────────────────────────────────────────────────
    # Per-IP sliding window over idea writes (create, vote, note).
    # Every write rewrites the whole ideas.json.
    rate_limit_requests: int = Field(default=60, ge=1, le=100_000)
    rate_limit_window: int = Field(default=60, ge=1, le=86400)  # seconds

    # ── Derived Paths ─────────────────────────────────────────────────────
    @property
    def uploads_dir(self) -> Path:
        """Directory holding uploaded attachment blobs."""
        return Path(self.data_dir) / UPLOADS_DIRNAME

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # DATA_DIR and data_dir both work
        "extra": "ignore",
    }


# Singleton instance used by the default application
settings = Settings()
