"""
Application configuration.

Defaults match the layout used by the services (SQLite file under data/,
books under books/). Environment variables override them for deployments
and tests.
"""

import os
from functools import lru_cache

from pydantic import BaseModel

# Storage keys
BOOKS_STORAGE_KEY = "@book_reader_books"
HIGHLIGHTS_KEY_PREFIX = "@book_reader_highlights_"

DEFAULT_HIGHLIGHT_COLOR = "#FFEB3B"  # yellow
DEFAULT_DB_PATH = "data/reading_progress.db"


class Settings(BaseModel):
    """Runtime settings for the book reader backend"""

    db_path: str = DEFAULT_DB_PATH
    books_dir: str = "books"
    default_color: str = DEFAULT_HIGHLIGHT_COLOR
    clip_overlaps: bool = False
    books_storage_key: str = BOOKS_STORAGE_KEY
    highlights_key_prefix: str = HIGHLIGHTS_KEY_PREFIX


def _env_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


@lru_cache
def get_settings() -> Settings:
    """
    Build settings from environment variables.

    Recognized variables:
        BOOKREADER_DB_PATH: SQLite database file
        BOOKREADER_BOOKS_DIR: Directory that relative book paths resolve against
        BOOKREADER_CLIP_OVERLAPS: Clip overlapping highlights when rendering
    """
    return Settings(
        db_path=os.getenv("BOOKREADER_DB_PATH", DEFAULT_DB_PATH),
        books_dir=os.getenv("BOOKREADER_BOOKS_DIR", "books"),
        clip_overlaps=_env_flag(os.getenv("BOOKREADER_CLIP_OVERLAPS")),
    )
