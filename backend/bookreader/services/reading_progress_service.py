"""
Reading Progress Service Module

Computes a book's reading percentage from page counters and stores it on
the book's record in the book collection.
"""

import logging
import math

from .books_service import BooksService

# Configure logger for this module
logger = logging.getLogger(__name__)


def compute_progress(current_page: int, total_pages: int) -> int:
    """
    Percentage of the book read, rounded half up (1 of 8 pages -> 13).

    The value is not clamped; callers keep current_page within total_pages.

    Args:
        current_page (int): Current page, starting at 1
        total_pages (int): Number of pages, at least 1

    Returns:
        int: Progress percentage

    Raises:
        ValueError: If total_pages is less than 1
    """
    if total_pages < 1:
        raise ValueError(f"total_pages must be at least 1, got {total_pages}")
    return math.floor(current_page / total_pages * 100 + 0.5)


class ReadingProgressService:
    """
    Progress tracker for reading sessions.

    There is no dirty check: every save request writes, even when the
    percentage did not change since the last save.
    """

    def __init__(self, books_service: BooksService):
        self.books_service = books_service

    async def save_progress(
        self, book_id: str, current_page: int, total_pages: int
    ) -> int | None:
        """
        Compute and persist the progress for a book.

        Args:
            book_id (str): Book identifier
            current_page (int): Page the reader is on
            total_pages (int): Number of pages in the book

        Returns:
            int | None: The saved percentage, or None if the book is not in the
            stored collection

        Raises:
            StorageReadError: If the book collection is corrupt
            StorageWriteError: If the write fails
        """
        progress = compute_progress(current_page, total_pages)
        updated = await self.books_service.update_progress(book_id, progress)
        return progress if updated is not None else None
