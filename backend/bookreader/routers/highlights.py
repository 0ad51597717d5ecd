"""
Highlights Router

API endpoints for creating, listing, recoloring and deleting highlights, and
for the rendered segment sequence of a book.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_library
from ..exceptions import StorageReadError, StorageWriteError
from ..models.highlights import (
    Highlight,
    HighlightCreate,
    HighlightSummary,
    Segment,
    UpdateColorRequest,
)
from ..models.reader import ReaderView
from ..services.library_service import LibraryService
from ..services.reader_session import ReaderSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/highlights", tags=["highlights"])


async def _session(library: LibraryService, book_id: str) -> ReaderSession:
    try:
        session = await library.sessions.open(book_id)
    except StorageReadError as e:
        logger.error(f"Error loading books: {e}")
        raise HTTPException(status_code=500, detail="Failed to load the book list")

    if session is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return session


def _release(library: LibraryService, book_id: str) -> None:
    """Drop cached highlights of a book no reader session holds"""
    if library.sessions.get(book_id) is None:
        library.highlights.forget(book_id)


@router.get("/{book_id}", response_model=list[Highlight])
async def get_highlights(book_id: str, library: LibraryService = Depends(get_library)):
    """
    Get all highlights for a book in the order they were created, including
    highlights whose text could not be located (position -1).
    """
    session = library.sessions.get(book_id)
    if session is not None:
        return session.highlights

    try:
        return await library.highlights.load(book_id)
    except StorageReadError as e:
        logger.error(f"Error loading highlights for {book_id}: {e}")
        raise HTTPException(status_code=500, detail="Saved highlights could not be read")
    finally:
        _release(library, book_id)


@router.post("/{book_id}", response_model=ReaderView)
async def create_highlight(
    book_id: str,
    highlight_data: HighlightCreate,
    library: LibraryService = Depends(get_library),
):
    """
    Highlight a text selection in a book, opening the book if needed.

    Returns:
        ReaderView: The session after the highlight, with rebuilt segments

    Raises:
        HTTPException: If the book is unknown or the selection is blank
    """
    session = await _session(library, book_id)
    if not session.select_text(highlight_data.selected_text):
        raise HTTPException(status_code=400, detail="Selected text is empty")

    await session.highlight_selection(
        color=highlight_data.color, near_offset=highlight_data.near_offset
    )
    return session.view()


@router.get("/{book_id}/segments", response_model=list[Segment])
async def get_segments(book_id: str, library: LibraryService = Depends(get_library)):
    session = await _session(library, book_id)
    return session.segments()


@router.get("/{book_id}/stats", response_model=HighlightSummary)
async def get_highlight_stats(
    book_id: str, library: LibraryService = Depends(get_library)
):
    try:
        return await library.highlights.summary(book_id)
    except StorageReadError as e:
        logger.error(f"Error loading highlights for {book_id}: {e}")
        raise HTTPException(status_code=500, detail="Saved highlights could not be read")
    finally:
        _release(library, book_id)


@router.delete("/{book_id}/{highlight_id}")
async def delete_highlight(
    book_id: str, highlight_id: str, library: LibraryService = Depends(get_library)
):
    """
    Delete a highlight by its ID.
    """
    session = library.sessions.get(book_id)
    try:
        if session is not None:
            deleted = await session.delete_highlight(highlight_id)
        else:
            deleted = await library.highlights.delete(book_id, highlight_id)
    except (StorageReadError, StorageWriteError) as e:
        logger.error(f"Error deleting highlight {highlight_id}: {e}")
        raise HTTPException(
            status_code=500, detail=f"Error deleting highlight: {str(e)}"
        )
    finally:
        _release(library, book_id)

    if not deleted:
        raise HTTPException(status_code=404, detail="Highlight not found")
    return {"message": "Highlight deleted successfully"}


@router.put("/{book_id}/{highlight_id}/color", response_model=Highlight)
async def update_highlight_color(
    book_id: str,
    highlight_id: str,
    color_data: UpdateColorRequest,
    library: LibraryService = Depends(get_library),
):
    """
    Change the color of a highlight. The stored entry is replaced as a whole.
    """
    session = library.sessions.get(book_id)
    try:
        if session is not None:
            highlight = await session.recolor_highlight(highlight_id, color_data.color)
        else:
            highlight = await library.highlights.update_color(
                book_id, highlight_id, color_data.color
            )
    except (StorageReadError, StorageWriteError) as e:
        logger.error(f"Error updating highlight {highlight_id}: {e}")
        raise HTTPException(
            status_code=500, detail=f"Error updating highlight color: {str(e)}"
        )
    finally:
        _release(library, book_id)

    if highlight is None:
        raise HTTPException(status_code=404, detail="Highlight not found")
    return highlight
