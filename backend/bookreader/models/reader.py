"""
Reader Session Type Models

State and response models for a single reading session.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel

from .books import Book, FileKind
from .highlights import Highlight, Segment


class SessionPhase(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"  # content fetched
    VIEWING = "viewing"  # page and selection events accepted
    SAVING = "saving"  # progress write in flight


class Notice(BaseModel):
    """A non-fatal message surfaced to the user"""

    level: Literal["info", "warning", "error"] = "info"
    message: str


class SelectionRequest(BaseModel):
    selected_text: str


class PageChangedRequest(BaseModel):
    page: int


class PagesLoadedRequest(BaseModel):
    total_pages: int


class ReaderView(BaseModel):
    """Everything the presentation layer needs to draw the reader screen"""

    book: Book
    file_kind: FileKind
    phase: SessionPhase
    available: bool
    segments: list[Segment]
    highlights: list[Highlight]
    selected_text: str | None = None
    current_page: int
    total_pages: int
    progress: int
    notices: list[Notice]
