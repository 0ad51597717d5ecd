"""
Reader Session Module

One ReaderSession holds the state of a single book being read: its content,
highlights, current selection, page counters and pending notices. Pure
computations (segment building, progress) receive this state explicitly.

Session lifecycle:
    idle -> loaded (content fetched) -> viewing -> saving -> viewing

Storage and content errors are caught here and turned into notices; no
exception escapes a public operation.
"""

import asyncio
import logging

from ..config import DEFAULT_HIGHLIGHT_COLOR
from ..exceptions import ContentLoadError, StorageReadError, StorageWriteError
from ..models.books import Book, FileKind
from ..models.highlights import Highlight, Segment
from ..models.reader import Notice, ReaderView, SessionPhase
from .books_service import BooksService
from .content_service import ContentService
from .highlights_service import HighlightsService
from .position_resolver import resolve_position
from .reading_progress_service import ReadingProgressService, compute_progress
from .segment_builder import build_segments
from .write_queue import DocumentWriteQueue

logger = logging.getLogger(__name__)


class ReaderSession:
    def __init__(
        self,
        book: Book,
        highlights_service: HighlightsService,
        progress_service: ReadingProgressService,
        content_service: ContentService,
        default_color: str = DEFAULT_HIGHLIGHT_COLOR,
        clip_overlaps: bool = False,
    ):
        self.book = book
        self.highlights_service = highlights_service
        self.progress_service = progress_service
        self.content_service = content_service
        self.default_color = default_color
        self.clip_overlaps = clip_overlaps

        self.phase = SessionPhase.IDLE
        self.file_kind = book.file_kind
        self.full_text = ""
        self.available = True
        self.selected_text: str | None = None
        # Plain-text books have no pages; 1 of 1 unless the client reports scroll pages
        self.current_page = 1
        self.total_pages = 1
        self.progress = book.progress
        self.notices: list[Notice] = []
        self._segments: list[Segment] = []

    @property
    def highlights(self) -> list[Highlight]:
        return self.highlights_service.cached(self.book.id) or []

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))

    def _rebuild_segments(self) -> None:
        if self.file_kind is FileKind.PLAIN and self.available:
            self._segments = build_segments(
                self.full_text, self.highlights, clip_overlaps=self.clip_overlaps
            )
        else:
            self._segments = []

    def _accepts_events(self) -> bool:
        if self.phase is SessionPhase.IDLE:
            logger.warning(f"Event for book {self.book.id} ignored: session not open")
            return False
        if self.phase is SessionPhase.LOADED:
            self.phase = SessionPhase.VIEWING
        return True

    async def _load_content(self) -> None:
        try:
            if self.file_kind is FileKind.PLAIN:
                self.full_text = await asyncio.to_thread(
                    self.content_service.load_text, self.book.file_path
                )
            elif self.file_kind is FileKind.PAGINATED:
                self.total_pages = await asyncio.to_thread(
                    self.content_service.count_pages, self.book.file_path
                )
            else:
                self.available = False
                self._notify(
                    "error", f"Unsupported file format: {self.book.file_path}"
                )
        except ContentLoadError as e:
            logger.error(f"Content unavailable for book {self.book.id}: {e}")
            self.available = False
            self.full_text = ""
            self._notify(
                "error",
                "Unable to load the file content. Make sure the file format "
                "is correct and the file is not damaged.",
            )

    async def _load_highlights(self) -> None:
        try:
            await self.highlights_service.load(self.book.id)
        except StorageReadError as e:
            logger.error(f"Highlights unavailable for book {self.book.id}: {e}")
            self._notify("warning", "Saved highlights could not be read.")

    async def open(self) -> None:
        """Fetch content and highlights; a second call is a no-op"""
        if self.phase is SessionPhase.IDLE:
            await self._load_content()
            await self._load_highlights()
            self._rebuild_segments()
            self.phase = SessionPhase.LOADED
            logger.info(
                f"Opened book {self.book.id} ({self.file_kind.value}, "
                f"{len(self.highlights)} highlights)"
            )

    def segments(self) -> list[Segment]:
        return list(self._segments)

    def select_text(self, text: str | None) -> bool:
        """
        Record the current selection. Blank selections are ignored.

        Returns:
            bool: True if the selection was accepted
        """
        if not self._accepts_events():
            return False
        if not text or not text.strip():
            return False
        self.selected_text = text
        return True

    def clear_selection(self) -> None:
        self.selected_text = None

    async def highlight_selection(
        self, color: str | None = None, near_offset: int | None = None
    ) -> Highlight | None:
        """
        Highlight the current selection.

        The offset is resolved once, here; a selection that cannot be found
        in the text is still stored with position -1 and not rendered.

        Returns:
            Highlight | None: The new highlight, or None if nothing is selected
        """
        if not self._accepts_events() or not self.selected_text:
            return None

        position = resolve_position(self.full_text, self.selected_text, near_offset)
        highlight = Highlight.create(
            text=self.selected_text,
            position=position,
            color=color or self.default_color,
        )
        self.selected_text = None

        try:
            await self.highlights_service.append(self.book.id, highlight)
        except StorageWriteError as e:
            logger.error(f"Highlight {highlight.id} not persisted: {e}")
            self._notify(
                "warning", "Highlight added, but it could not be saved to storage."
            )
        except StorageReadError as e:
            logger.error(f"Highlight {highlight.id} not persisted: {e}")
            self._notify("warning", "Saved highlights could not be read.")
            return None

        self._rebuild_segments()
        return highlight

    async def delete_highlight(self, highlight_id: str) -> bool:
        if not self._accepts_events():
            return False
        try:
            deleted = await self.highlights_service.delete(self.book.id, highlight_id)
        except StorageWriteError as e:
            logger.error(f"Deletion of highlight {highlight_id} not persisted: {e}")
            self._notify(
                "warning", "Highlight removed, but the change could not be saved."
            )
            deleted = True
        except StorageReadError as e:
            logger.error(f"Highlight {highlight_id} not deleted: {e}")
            self._notify("warning", "Saved highlights could not be read.")
            deleted = False
        self._rebuild_segments()
        return deleted

    async def recolor_highlight(self, highlight_id: str, color: str) -> Highlight | None:
        if not self._accepts_events():
            return None
        recolored = None
        try:
            recolored = await self.highlights_service.update_color(
                self.book.id, highlight_id, color
            )
        except StorageWriteError as e:
            logger.error(f"Color change of highlight {highlight_id} not persisted: {e}")
            self._notify(
                "warning", "Highlight color changed, but it could not be saved."
            )
            recolored = next(
                (h for h in self.highlights if h.id == highlight_id), None
            )
        except StorageReadError as e:
            logger.error(f"Highlight {highlight_id} not recolored: {e}")
            self._notify("warning", "Saved highlights could not be read.")
        self._rebuild_segments()
        return recolored

    def on_load_complete(self, total_pages: int) -> None:
        """Page count reported by the page renderer"""
        if not self._accepts_events() or total_pages < 1:
            return
        self.total_pages = total_pages
        self.current_page = min(self.current_page, total_pages)

    def on_page_changed(self, page: int) -> None:
        if not self._accepts_events() or page < 1:
            return
        self.current_page = page

    async def save_progress(self) -> int | None:
        """
        Persist the current progress. Always writes; there is no check
        against the last saved value.

        Returns:
            int | None: The saved percentage, or None if it was not saved
        """
        if self.phase is SessionPhase.IDLE:
            return None

        self.phase = SessionPhase.SAVING
        saved = None
        try:
            saved = await self.progress_service.save_progress(
                self.book.id, self.current_page, self.total_pages
            )
        except (StorageReadError, StorageWriteError) as e:
            logger.error(f"Progress for book {self.book.id} not saved: {e}")
            self._notify("warning", "Reading progress could not be saved.")
        finally:
            self.phase = SessionPhase.VIEWING

        self.progress = compute_progress(self.current_page, self.total_pages)
        return saved

    async def close(self) -> int | None:
        """Leave the reader: save progress once, then release session state"""
        saved = await self.save_progress()
        self.highlights_service.forget(self.book.id)
        self.phase = SessionPhase.IDLE
        logger.info(f"Closed book {self.book.id}")
        return saved

    def view(self) -> ReaderView:
        """Snapshot of the session; pending notices are handed over and cleared"""
        notices, self.notices = self.notices, []
        return ReaderView(
            book=self.book.model_copy(update={"progress": self.progress}),
            file_kind=self.file_kind,
            phase=self.phase,
            available=self.available,
            segments=self.segments(),
            highlights=self.highlights,
            selected_text=self.selected_text,
            current_page=self.current_page,
            total_pages=self.total_pages,
            progress=self.progress,
            notices=notices,
        )


class ReaderSessionManager:
    """Keeps one open session per book"""

    def __init__(
        self,
        books_service: BooksService,
        highlights_service: HighlightsService,
        progress_service: ReadingProgressService,
        content_service: ContentService,
        default_color: str = DEFAULT_HIGHLIGHT_COLOR,
        clip_overlaps: bool = False,
    ):
        self.books_service = books_service
        self.highlights_service = highlights_service
        self.progress_service = progress_service
        self.content_service = content_service
        self.default_color = default_color
        self.clip_overlaps = clip_overlaps
        self._sessions: dict[str, ReaderSession] = {}
        # Concurrent opens of one book wait for the first to finish
        self._opening = DocumentWriteQueue()

    def get(self, book_id: str) -> ReaderSession | None:
        return self._sessions.get(book_id)

    async def open(self, book_id: str) -> ReaderSession | None:
        """
        Open (or return the already open) session for a book.

        Returns:
            ReaderSession | None: The session, or None if the book is unknown

        Raises:
            StorageReadError: If the book collection cannot be read
        """
        async with self._opening.slot(book_id):
            session = self._sessions.get(book_id)
            if session is not None:
                return session

            book = await self.books_service.get_book(book_id)
            if book is None:
                return None

            session = ReaderSession(
                book,
                self.highlights_service,
                self.progress_service,
                self.content_service,
                default_color=self.default_color,
                clip_overlaps=self.clip_overlaps,
            )
            await session.open()
            self._sessions[book_id] = session
            return session

    async def close(self, book_id: str) -> ReaderSession | None:
        session = self._sessions.pop(book_id, None)
        if session is not None:
            await session.close()
        return session
