"""
NoteShelf Backend — Application Configuration
==============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or a .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by the application factory, the store bootstrap and the CLI runner.
When:  Loaded once at module import time; validated before the app starts.
"""

from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

# The backing file lives next to the application package: backend/notes.db
DEFAULT_DATABASE_PATH = Path(__file__).resolve().parent.parent / "notes.db"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings have working defaults for local development, so the
    server starts with no environment at all.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # What: Filesystem path of the SQLite file holding the notes table.
    # Created (with its parent directory) on first startup.
    database_path: str = Field(
        default=str(DEFAULT_DATABASE_PATH),
        description="Path to the SQLite file backing the notes table",
    )

    @property
    def database_url(self) -> str:
        """Async SQLAlchemy URL for the configured SQLite file (aiosqlite driver)."""
        return f"sqlite+aiosqlite:///{self.database_path}"

    # ── Server ────────────────────────────────────────────────────────────
    host: str = Field(default="0.0.0.0")

    # What: Listening port, read from the PORT environment variable.
    port: int = Field(default=5000, ge=1, le=65535)

    # What: Controls verbosity of application logging.
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
    # Format: Comma-separated origins, or "*" for any origin.
    cors_origins: str = Field(default="*")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,  # PORT and port both work
        "extra": "ignore",
    }


# Singleton instance, imported throughout the application
settings = Settings()
