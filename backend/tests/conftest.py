import os
import tempfile

import pytest

from bookreader.config import Settings
from bookreader.services.books_service import BooksService
from bookreader.services.highlights_service import HighlightsService
from bookreader.services.key_value_store import KeyValueStore
from bookreader.services.library_service import LibraryService
from bookreader.services.write_queue import DocumentWriteQueue

SAMPLE_TEXT = "The quick brown fox"


@pytest.fixture
def temp_db():
    """Create a temporary database file for testing"""
    with tempfile.NamedTemporaryFile(mode="w", delete=False, suffix=".db") as f:
        db_path = f.name

    yield db_path

    # Cleanup
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def store(temp_db):
    return KeyValueStore(db_path=temp_db)


@pytest.fixture
def write_queue():
    return DocumentWriteQueue()


@pytest.fixture
def highlights_service(store, write_queue):
    return HighlightsService(store, write_queue)


@pytest.fixture
def books_service(store, write_queue):
    return BooksService(store, write_queue)


@pytest.fixture
def books_dir(tmp_path):
    directory = tmp_path / "books"
    directory.mkdir()
    (directory / "fox.txt").write_text(SAMPLE_TEXT, encoding="utf-8")
    return directory


@pytest.fixture
def library(temp_db, books_dir):
    return LibraryService(Settings(db_path=temp_db, books_dir=str(books_dir)))

