"""
Books Service Module

This module manages the bookshelf: the full book collection is stored as one
JSON list under a fixed key and is always read and written as a whole.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from ..config import BOOKS_STORAGE_KEY
from ..exceptions import StorageReadError
from ..models.books import Book, BookCreate
from .key_value_store import KeyValueStore
from .write_queue import DocumentWriteQueue

# Configure logger for this module
logger = logging.getLogger(__name__)

_book_list = TypeAdapter(list[Book])


class BooksService:
    """
    Service class for the book collection.

    Provides "read all, replace all" access plus the single-record helpers the
    bookshelf and the progress tracker need.
    """

    def __init__(
        self,
        store: KeyValueStore,
        write_queue: DocumentWriteQueue | None = None,
        storage_key: str = BOOKS_STORAGE_KEY,
    ):
        self.store = store
        self.write_queue = write_queue or DocumentWriteQueue()
        self.storage_key = storage_key

    async def list_books(self) -> list[Book]:
        """
        Read the whole book collection.

        Returns:
            list[Book]: All books, empty if the collection was never saved

        Raises:
            StorageReadError: If the stored collection cannot be parsed
        """
        payload = await self.store.get(self.storage_key)
        if payload is None:
            return []
        return self._parse(payload)

    def _parse(self, payload: str) -> list[Book]:
        try:
            return _book_list.validate_json(payload)
        except ValidationError as e:
            logger.warning(f"Corrupt book collection: {e}")
            raise StorageReadError(self.storage_key, "invalid book data") from e

    async def _write(self, books: list[Book]) -> None:
        payload = _book_list.dump_json(books, by_alias=True).decode("utf-8")
        await self.store.set(self.storage_key, payload)

    async def replace_all(self, books: list[Book]) -> None:
        """Persist a full replacement collection"""
        async with self.write_queue.slot(self.storage_key):
            await self._write(books)
        logger.info(f"Saved {len(books)} books")

    async def get_book(self, book_id: str) -> Book | None:
        books = await self.list_books()
        return next((book for book in books if book.id == book_id), None)

    async def add_book(self, book_data: BookCreate) -> Book:
        """
        Add a new book with progress 0 to the end of the collection.

        Returns:
            Book: The stored book with its generated id
        """
        book = book_data.to_book()
        async with self.write_queue.slot(self.storage_key):
            books = await self.list_books()
            await self._write([*books, book])
        logger.info(f"Added book {book.id}: {book.title}")
        return book

    async def remove_book(self, book_id: str) -> bool:
        async with self.write_queue.slot(self.storage_key):
            books = await self.list_books()
            remaining = [book for book in books if book.id != book_id]
            if len(remaining) == len(books):
                return False
            await self._write(remaining)
        logger.info(f"Removed book {book_id}")
        return True

    async def update_progress(self, book_id: str, progress: int) -> Book | None:
        """
        Set the progress of one book, leaving every other record untouched.

        The collection is rewritten in place (same order, same records); it is
        not created if it does not exist yet.

        Returns:
            Book | None: The updated book, or None if the collection is absent
            or does not contain the book
        """
        async with self.write_queue.slot(self.storage_key):
            payload = await self.store.get(self.storage_key)
            if payload is None:
                logger.info(f"No book collection stored, progress for {book_id} not saved")
                return None

            books = self._parse(payload)
            updated_book = None
            updated_books = []
            for book in books:
                if book.id == book_id:
                    book = book.model_copy(update={"progress": progress})
                    updated_book = book
                updated_books.append(book)

            if updated_book is None:
                logger.warning(f"Book {book_id} not found in collection")
                return None

            await self._write(updated_books)

        logger.info(f"Reading progress saved for {book_id}: {progress}%")
        return updated_book
