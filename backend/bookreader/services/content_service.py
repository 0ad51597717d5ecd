"""
Document Content Service Module

Supplies document content to reader sessions: the full text of plain-text
books and the page count of PDF books. Text is not extracted from PDFs.
"""

import logging
from pathlib import Path

from PyPDF2 import PdfReader

from ..exceptions import ContentLoadError

logger = logging.getLogger(__name__)


class ContentService:
    def __init__(self, books_dir: str = "books"):
        self.books_dir = Path(books_dir)

    def resolve_path(self, file_path: str) -> Path:
        """Relative book paths are resolved against the books directory"""
        path = Path(file_path)
        if not path.is_absolute():
            path = self.books_dir / path
        return path

    def load_text(self, file_path: str) -> str:
        """
        Read a plain-text book as UTF-8.

        Raises:
            ContentLoadError: If the file is missing, unreadable or not UTF-8
        """
        path = self.resolve_path(file_path)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ContentLoadError(file_path, "file not found") from e
        except UnicodeDecodeError as e:
            raise ContentLoadError(file_path, "file is not valid UTF-8 text") from e
        except OSError as e:
            logger.error(f"Error reading {path}: {e}")
            raise ContentLoadError(file_path, str(e)) from e

    def count_pages(self, file_path: str) -> int:
        """
        Count the pages of a PDF book.

        Raises:
            ContentLoadError: If the file is missing, corrupt or has no pages
        """
        path = self.resolve_path(file_path)
        if not path.exists():
            raise ContentLoadError(file_path, "file not found")

        try:
            with open(path, "rb") as file:
                page_count = len(PdfReader(file).pages)
        except Exception as e:
            logger.error(f"Error reading PDF {path}: {e}")
            raise ContentLoadError(file_path, f"unreadable PDF: {e}") from e

        if page_count < 1:
            raise ContentLoadError(file_path, "PDF has no pages")
        return page_count
