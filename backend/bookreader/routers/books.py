"""
Books Router

API endpoints for the bookshelf.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..dependencies import get_library
from ..exceptions import StorageReadError, StorageWriteError
from ..models.books import Book, BookCreate
from ..services.library_service import LibraryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])


@router.get("/", response_model=list[Book])
async def list_books(library: LibraryService = Depends(get_library)):
    """
    List every book on the shelf.

    Raises:
        HTTPException: If the stored book list cannot be read
    """
    try:
        return await library.books.list_books()
    except StorageReadError as e:
        logger.error(f"Error loading books: {e}")
        raise HTTPException(status_code=500, detail="Failed to load the book list")


@router.post("/", response_model=Book)
async def add_book(
    book_data: BookCreate, library: LibraryService = Depends(get_library)
):
    """
    Add a book to the shelf. New books start with 0% progress.
    """
    try:
        return await library.books.add_book(book_data)
    except (StorageReadError, StorageWriteError) as e:
        logger.error(f"Error adding book: {e}")
        raise HTTPException(status_code=500, detail="Failed to save the book list")


@router.get("/{book_id}", response_model=Book)
async def get_book(book_id: str, library: LibraryService = Depends(get_library)):
    try:
        book = await library.books.get_book(book_id)
    except StorageReadError as e:
        logger.error(f"Error loading books: {e}")
        raise HTTPException(status_code=500, detail="Failed to load the book list")

    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


@router.delete("/{book_id}")
async def remove_book(book_id: str, library: LibraryService = Depends(get_library)):
    """
    Remove a book from the shelf along with its highlights.
    """
    try:
        await library.sessions.close(book_id)
        removed = await library.books.remove_book(book_id)
        if not removed:
            raise HTTPException(status_code=404, detail="Book not found")
        await library.highlights.clear(book_id)
    except HTTPException:
        raise
    except (StorageReadError, StorageWriteError) as e:
        logger.error(f"Error removing book {book_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error removing book: {str(e)}")

    return {"message": "Book removed successfully"}
