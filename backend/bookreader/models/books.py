"""
Book Type Models

Books on the shelf and the file kinds the reader can display.
"""

import uuid
from enum import Enum
from pathlib import PurePath

from pydantic import BaseModel, ConfigDict, Field


class FileKind(str, Enum):
    PLAIN = "plain"
    PAGINATED = "paginated"
    UNSUPPORTED = "unsupported"

    @classmethod
    def from_path(cls, file_path: str) -> "FileKind":
        """Derive the file kind from the file extension (case-insensitive)"""
        extension = PurePath(file_path).suffix.lower()
        if extension == ".txt":
            return cls.PLAIN
        if extension == ".pdf":
            return cls.PAGINATED
        return cls.UNSUPPORTED


class Book(BaseModel):
    """A book on the shelf, serialized with the camelCase `filePath` key"""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    author: str | None = None
    file_path: str = Field(alias="filePath")
    progress: int = 0

    @property
    def file_kind(self) -> FileKind:
        return FileKind.from_path(self.file_path)


class BookCreate(BaseModel):
    """Request model for adding a book to the shelf"""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    author: str | None = None
    file_path: str = Field(alias="filePath", min_length=1)

    def to_book(self) -> Book:
        return Book(
            id=str(uuid.uuid4()),
            title=self.title,
            author=self.author,
            file_path=self.file_path,
            progress=0,
        )
