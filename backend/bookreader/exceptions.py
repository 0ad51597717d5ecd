"""
Error types raised by the storage and content services.

Services raise these; the reader session and the routers catch them at their
boundary and turn them into user-visible notices or HTTP errors.
"""


class BookReaderError(Exception):
    """Base class for all book reader errors"""


class StorageReadError(BookReaderError):
    """Persisted data is present but cannot be parsed or read"""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not read stored data for {key}: {reason}")


class StorageWriteError(BookReaderError):
    """A persistence call failed"""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Could not save data for {key}: {reason}")


class ContentLoadError(BookReaderError):
    """Document content is unavailable or corrupt"""

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(f"Could not load {file_path}: {reason}")
