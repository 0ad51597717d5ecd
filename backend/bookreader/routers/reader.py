"""
Reader Router

API endpoints driving a reading session: opening a book, selection and page
events, progress saves and leaving the reader.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_library
from ..exceptions import StorageReadError
from ..models.reader import (
    PageChangedRequest,
    PagesLoadedRequest,
    ReaderView,
    SelectionRequest,
)
from ..services.library_service import LibraryService
from ..services.reader_session import ReaderSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reader", tags=["reader"])


async def _open_session(library: LibraryService, book_id: str) -> ReaderSession:
    try:
        session = await library.sessions.open(book_id)
    except StorageReadError as e:
        logger.error(f"Error loading books: {e}")
        raise HTTPException(status_code=500, detail="Failed to load the book list")

    if session is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return session


def _require_session(library: LibraryService, book_id: str) -> ReaderSession:
    session = library.sessions.get(book_id)
    if session is None:
        raise HTTPException(status_code=409, detail="Book is not open")
    return session


@router.post("/{book_id}/open", response_model=ReaderView)
async def open_book(book_id: str, library: LibraryService = Depends(get_library)):
    """
    Open a book in the reader, loading its content and highlights.
    Opening a book that is already open returns the current session.
    """
    session = await _open_session(library, book_id)
    return session.view()


@router.get("/{book_id}", response_model=ReaderView)
async def get_reader_view(book_id: str, library: LibraryService = Depends(get_library)):
    return _require_session(library, book_id).view()


@router.post("/{book_id}/selection", response_model=ReaderView)
async def select_text(
    book_id: str,
    selection: SelectionRequest,
    library: LibraryService = Depends(get_library),
):
    """
    Record the text the user selected. Blank selections are ignored.
    """
    session = _require_session(library, book_id)
    session.select_text(selection.selected_text)
    return session.view()


@router.delete("/{book_id}/selection", response_model=ReaderView)
async def clear_selection(book_id: str, library: LibraryService = Depends(get_library)):
    session = _require_session(library, book_id)
    session.clear_selection()
    return session.view()


@router.post("/{book_id}/pages", response_model=ReaderView)
async def pages_loaded(
    book_id: str,
    request: PagesLoadedRequest,
    library: LibraryService = Depends(get_library),
):
    """
    Report the page count once the page renderer has loaded the document.
    """
    if request.total_pages < 1:
        raise HTTPException(status_code=400, detail="total_pages must be at least 1")
    session = _require_session(library, book_id)
    session.on_load_complete(request.total_pages)
    return session.view()


@router.post("/{book_id}/page", response_model=ReaderView)
async def page_changed(
    book_id: str,
    request: PageChangedRequest,
    library: LibraryService = Depends(get_library),
):
    if request.page < 1:
        raise HTTPException(status_code=400, detail="page must be at least 1")
    session = _require_session(library, book_id)
    session.on_page_changed(request.page)
    return session.view()


@router.post("/{book_id}/progress", response_model=ReaderView)
async def save_progress(book_id: str, library: LibraryService = Depends(get_library)):
    """
    Save the reading progress of the open book.
    """
    session = _require_session(library, book_id)
    await session.save_progress()
    return session.view()


@router.post("/{book_id}/close", response_model=ReaderView)
async def close_book(book_id: str, library: LibraryService = Depends(get_library)):
    """
    Leave the reader. Progress is always saved once on the way out.
    """
    session = await library.sessions.close(book_id)
    if session is None:
        raise HTTPException(status_code=409, detail="Book is not open")
    return session.view()
