"""
Configuration for Pagemark.

Settings are read from environment variables (and a local .env file)
only by the entry points; the library classes take explicit arguments.
"""

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


@dataclass
class Settings:
    """Application settings loaded from environment."""

    # Persistence
    database_url: str = "sqlite:///./pagemark.db"
    database_echo: bool = False
    books_key: str = "SavedBooks"
    notes_key: str = "SavedNotes"
    strict_load: bool = False

    # OCR
    ocr_languages: str = "eng"
    ocr_confidence_threshold: float = 0.0
    ocr_timeout_seconds: float = 30.0

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate values."""
        if not self.books_key or not self.notes_key:
            raise ValueError("books_key and notes_key cannot be empty")

        if self.books_key == self.notes_key:
            raise ValueError(f"books_key and notes_key must differ, got '{self.books_key}' for both")

        if not 0.0 <= self.ocr_confidence_threshold <= 1.0:
            raise ValueError(
                f"ocr_confidence_threshold must be in [0, 1], got {self.ocr_confidence_threshold}"
            )

        if self.ocr_timeout_seconds <= 0:
            raise ValueError(f"ocr_timeout_seconds must be > 0, got {self.ocr_timeout_seconds}")

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        load_dotenv()
        return cls(
            database_url=os.getenv("PAGEMARK_DATABASE_URL", cls.database_url),
            database_echo=_env_flag("PAGEMARK_DATABASE_ECHO"),
            strict_load=_env_flag("PAGEMARK_STRICT_LOAD"),
            ocr_languages=os.getenv("PAGEMARK_OCR_LANGUAGES", cls.ocr_languages),
            ocr_confidence_threshold=float(
                os.getenv("PAGEMARK_OCR_CONFIDENCE", cls.ocr_confidence_threshold)
            ),
            ocr_timeout_seconds=float(os.getenv("PAGEMARK_OCR_TIMEOUT", cls.ocr_timeout_seconds)),
            log_level=os.getenv("PAGEMARK_LOG_LEVEL", cls.log_level).upper(),
            log_file=os.getenv("PAGEMARK_LOG_FILE") or None,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings.from_env()
