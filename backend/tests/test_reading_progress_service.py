"""
Unit tests for progress computation and the progress tracker.

Tests cover:
- Percentage bounds and half-up rounding
- Invalid page counts
- Map-and-replace of the matching book record
- Absent collections and unknown books
"""

import json
from unittest.mock import patch

import pytest

from bookreader.config import BOOKS_STORAGE_KEY
from bookreader.exceptions import StorageReadError
from bookreader.models.books import Book
from bookreader.services.reading_progress_service import (
    ReadingProgressService,
    compute_progress,
)


def make_book(book_id: str, file_path: str = "fox.txt", progress: int = 0) -> Book:
    return Book(id=book_id, title=f"Book {book_id}", file_path=file_path, progress=progress)


class TestComputeProgress:
    @pytest.mark.parametrize(
        "current_page, total_pages, expected",
        [(1, 1, 100), (1, 4, 25), (3, 4, 75), (1, 3, 33), (2, 3, 67), (2, 200, 1)],
    )
    def test_percentages(self, current_page, total_pages, expected):
        assert compute_progress(current_page, total_pages) == expected

    def test_halves_round_up(self):
        assert compute_progress(1, 8) == 13
        assert compute_progress(1, 40) == 3

    def test_last_page_is_complete(self):
        assert compute_progress(250, 250) == 100

    def test_zero_total_pages_rejected(self):
        with pytest.raises(ValueError):
            compute_progress(1, 0)


class TestSaveProgress:
    @pytest.mark.asyncio
    async def test_updates_only_matching_book(self, books_service, store):
        books = [make_book("a", progress=10), make_book("b", progress=20), make_book("c")]
        await books_service.replace_all(books)
        tracker = ReadingProgressService(books_service)

        assert await tracker.save_progress("b", 3, 4) == 75

        stored = json.loads(await store.get(BOOKS_STORAGE_KEY))
        assert [(b["id"], b["progress"]) for b in stored] == [
            ("a", 10),
            ("b", 75),
            ("c", 0),
        ]
        assert stored[1]["filePath"] == "fox.txt"
        assert stored[1]["title"] == "Book b"

    @pytest.mark.asyncio
    async def test_no_collection_saves_nothing(self, books_service, store):
        tracker = ReadingProgressService(books_service)

        assert await tracker.save_progress("a", 1, 2) is None
        assert await store.get(BOOKS_STORAGE_KEY) is None

    @pytest.mark.asyncio
    async def test_unknown_book(self, books_service):
        await books_service.replace_all([make_book("a", progress=10)])
        tracker = ReadingProgressService(books_service)

        assert await tracker.save_progress("zzz", 1, 2) is None
        assert (await books_service.get_book("a")).progress == 10

    @pytest.mark.asyncio
    async def test_saving_same_value_still_writes(self, books_service, store):
        await books_service.replace_all([make_book("a", progress=50)])
        tracker = ReadingProgressService(books_service)

        with patch.object(store, "set", wraps=store.set) as spy:
            await tracker.save_progress("a", 1, 2)
        assert spy.call_count == 1

    @pytest.mark.asyncio
    async def test_corrupt_collection(self, books_service, store):
        await store.set(BOOKS_STORAGE_KEY, "[{")
        tracker = ReadingProgressService(books_service)

        with pytest.raises(StorageReadError):
            await tracker.save_progress("a", 1, 2)
