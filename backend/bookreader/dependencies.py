from functools import lru_cache

from .config import get_settings
from .services.library_service import LibraryService


@lru_cache(maxsize=1)
def get_library() -> LibraryService:
    return LibraryService(get_settings())
