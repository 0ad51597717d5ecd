"""
Services Package

This package contains the storage services for the bookshelf and per-book
highlights, the highlight segmentation engine, the progress tracker and the
reader session controller, plus a facade that wires them together.
"""

from .books_service import BooksService
from .content_service import ContentService
from .highlights_service import HighlightsService
from .key_value_store import KeyValueStore
from .library_service import LibraryService
from .position_resolver import find_occurrences, resolve_position
from .reader_session import ReaderSession, ReaderSessionManager
from .reading_progress_service import ReadingProgressService, compute_progress
from .segment_builder import build_segments
from .write_queue import DocumentWriteQueue

__all__ = [
    "BooksService",
    "ContentService",
    "DocumentWriteQueue",
    "HighlightsService",
    "KeyValueStore",
    "LibraryService",
    "ReaderSession",
    "ReaderSessionManager",
    "ReadingProgressService",
    "build_segments",
    "compute_progress",
    "find_occurrences",
    "resolve_position",
]
