"""
Library Service Module

A facade that builds and wires the storage, highlight, progress, content
and session services around one SQLite database, so routers and tests can
work with a single object.
"""

import logging

from ..config import Settings
from .books_service import BooksService
from .content_service import ContentService
from .highlights_service import HighlightsService
from .key_value_store import KeyValueStore
from .reader_session import ReaderSessionManager
from .reading_progress_service import ReadingProgressService
from .write_queue import DocumentWriteQueue

# Configure logger for this module
logger = logging.getLogger(__name__)


class LibraryService:
    """
    Facade coordinating the specialized services:
    - KeyValueStore: string persistence in SQLite
    - BooksService: the book collection
    - HighlightsService: per-book highlight collections
    - ReadingProgressService: progress percentage on book records
    - ContentService: document text and page counts
    - ReaderSessionManager: open reading sessions
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the library and its specialized services.

        Args:
            settings (Settings | None): Runtime settings, defaults if omitted
        """
        self.settings = settings or Settings()

        # One queue for every key so the books key and highlight keys share it
        self.write_queue = DocumentWriteQueue()
        self.store = KeyValueStore(self.settings.db_path)
        self.books = BooksService(
            self.store, self.write_queue, self.settings.books_storage_key
        )
        self.highlights = HighlightsService(
            self.store, self.write_queue, self.settings.highlights_key_prefix
        )
        self.progress = ReadingProgressService(self.books)
        self.content = ContentService(self.settings.books_dir)
        self.sessions = ReaderSessionManager(
            self.books,
            self.highlights,
            self.progress,
            self.content,
            default_color=self.settings.default_color,
            clip_overlaps=self.settings.clip_overlaps,
        )
        logger.info(f"Library initialized with database {self.settings.db_path}")
