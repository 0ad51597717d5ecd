"""
Highlights Service Module

This module manages the persisted collection of text highlights for each
book. A book's highlights are stored as one JSON list under
"@book_reader_highlights_<book_id>" and every change rewrites the whole list.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from ..config import HIGHLIGHTS_KEY_PREFIX
from ..exceptions import StorageReadError
from ..models.highlights import Highlight, HighlightSummary
from .key_value_store import KeyValueStore
from .write_queue import DocumentWriteQueue

# Configure logger for this module
logger = logging.getLogger(__name__)

_highlight_list = TypeAdapter(list[Highlight])


class HighlightsService:
    """
    Highlight store keyed by book id.

    The in-memory set for a book is the source of truth for the running
    session: it is updated before the write is attempted, so a failed write
    (StorageWriteError) never loses the highlight the user just made.
    Mutations for one book run one at a time through the write queue.
    """

    def __init__(
        self,
        store: KeyValueStore,
        write_queue: DocumentWriteQueue | None = None,
        key_prefix: str = HIGHLIGHTS_KEY_PREFIX,
    ):
        """
        Initialize the highlights service.

        Args:
            store (KeyValueStore): Persistence backend
            write_queue (DocumentWriteQueue | None): Shared per-key write queue
            key_prefix (str): Prefix joined with the book id to form storage keys
        """
        self.store = store
        self.write_queue = write_queue or DocumentWriteQueue()
        self.key_prefix = key_prefix
        self._highlights: dict[str, list[Highlight]] = {}

    def storage_key(self, book_id: str) -> str:
        return f"{self.key_prefix}{book_id}"

    async def load(self, book_id: str) -> list[Highlight]:
        """
        Load the persisted highlights for a book.

        Args:
            book_id (str): Book identifier

        Returns:
            list[Highlight]: Stored highlights in insertion order, empty if none

        Raises:
            StorageReadError: If a payload exists but is not a valid highlight list
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            return await self._load(book_id)

    async def _load(self, book_id: str) -> list[Highlight]:
        # Caller holds the write queue slot for this book
        key = self.storage_key(book_id)
        payload = await self.store.get(key)
        if payload is None:
            highlights = []
        else:
            try:
                highlights = _highlight_list.validate_json(payload)
            except ValidationError as e:
                logger.warning(f"Corrupt highlight data for book {book_id}: {e}")
                # Later writes start over from an empty set
                self._highlights[book_id] = []
                raise StorageReadError(key, "invalid highlight data") from e

        self._highlights[book_id] = highlights
        logger.info(f"Loaded {len(highlights)} highlights for book {book_id}")
        return list(highlights)

    def cached(self, book_id: str) -> list[Highlight] | None:
        """Return the in-memory set for a book, or None if it was never loaded"""
        highlights = self._highlights.get(book_id)
        return list(highlights) if highlights is not None else None

    async def _current(self, book_id: str) -> list[Highlight]:
        if book_id in self._highlights:
            return self._highlights[book_id]
        return await self._load(book_id)

    async def _persist(self, book_id: str, highlights: list[Highlight]) -> None:
        self._highlights[book_id] = highlights
        payload = _highlight_list.dump_json(highlights).decode("utf-8")
        await self.store.set(self.storage_key(book_id), payload)

    async def append(self, book_id: str, highlight: Highlight) -> list[Highlight]:
        """
        Add one highlight and persist the full updated set.

        Args:
            book_id (str): Book identifier
            highlight (Highlight): The new highlight

        Returns:
            list[Highlight]: The updated set

        Raises:
            ValueError: If a highlight with the same id is already stored
            StorageWriteError: If persisting fails (the in-memory set is kept)
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            current = await self._current(book_id)
            if any(existing.id == highlight.id for existing in current):
                raise ValueError(f"Highlight {highlight.id} already exists")

            updated = [*current, highlight]
            await self._persist(book_id, updated)

        logger.info(
            f"Saved highlight {highlight.id} for book {book_id} (position {highlight.position})"
        )
        return list(updated)

    async def save(self, book_id: str, highlights: list[Highlight]) -> None:
        """
        Persist an arbitrary replacement set (bulk edits and deletes).

        Raises:
            StorageWriteError: If persisting fails (the in-memory set is kept)
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            await self._persist(book_id, list(highlights))
        logger.info(f"Saved {len(highlights)} highlights for book {book_id}")

    async def delete(self, book_id: str, highlight_id: str) -> bool:
        """
        Delete a highlight by id.

        Returns:
            bool: True if a highlight was removed, False if no highlight matched
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            current = await self._current(book_id)
            remaining = [h for h in current if h.id != highlight_id]
            if len(remaining) == len(current):
                return False
            await self._persist(book_id, remaining)

        logger.info(f"Deleted highlight {highlight_id} from book {book_id}")
        return True

    async def replace(self, book_id: str, highlight: Highlight) -> bool:
        """
        Swap the stored entry that has the same id for a new one, keeping its
        place in the list.

        Returns:
            bool: True if an entry was replaced, False if no highlight matched
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            current = await self._current(book_id)
            if not any(h.id == highlight.id for h in current):
                return False
            updated = [highlight if h.id == highlight.id else h for h in current]
            await self._persist(book_id, updated)

        logger.info(f"Replaced highlight {highlight.id} in book {book_id}")
        return True

    async def update_color(
        self, book_id: str, highlight_id: str, color: str
    ) -> Highlight | None:
        """
        Change a highlight's color by replacing the whole entry.

        Returns:
            Highlight | None: The new entry, or None if no highlight matched
        """
        async with self.write_queue.slot(self.storage_key(book_id)):
            current = await self._current(book_id)
            existing = next((h for h in current if h.id == highlight_id), None)
            if existing is None:
                return None

            recolored = existing.model_copy(update={"color": color})
            updated = [recolored if h.id == highlight_id else h for h in current]
            await self._persist(book_id, updated)

        logger.info(f"Updated highlight {highlight_id} color to {color}")
        return recolored

    async def summary(self, book_id: str) -> HighlightSummary:
        """Count the highlights of a book and preview the latest one"""
        highlights = self.cached(book_id)
        if highlights is None:
            highlights = await self.load(book_id)
        latest_text = None
        if highlights:
            text = highlights[-1].text
            latest_text = text[:50] + "..." if len(text) > 50 else text

        return HighlightSummary(
            book_id=book_id,
            highlights_count=len(highlights),
            unresolved_count=sum(1 for h in highlights if not h.is_located),
            latest_highlight_text=latest_text,
        )

    def forget(self, book_id: str) -> None:
        """Drop the in-memory set for a book"""
        self._highlights.pop(book_id, None)

    async def clear(self, book_id: str) -> None:
        """Remove every stored highlight of a book"""
        async with self.write_queue.slot(self.storage_key(book_id)):
            await self.store.remove(self.storage_key(book_id))
            self.forget(book_id)
        logger.info(f"Cleared highlights for book {book_id}")
