"""
Highlight Type Models

Pydantic models for text highlights and the rendered segment sequence.
A highlight is anchored by the character offset of its first character
within the document's full text.
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field

from ..config import DEFAULT_HIGHLIGHT_COLOR

# Offset used when the highlighted text could not be located in the document
POSITION_NOT_FOUND = -1


class Highlight(BaseModel):
    """A user-created highlight. Entries are replaced, never edited in place."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str = Field(min_length=1)
    position: int = Field(ge=POSITION_NOT_FOUND)
    color: str = DEFAULT_HIGHLIGHT_COLOR

    @property
    def end(self) -> int:
        return self.position + len(self.text)

    @property
    def is_located(self) -> bool:
        return self.position >= 0

    @classmethod
    def create(
        cls, text: str, position: int, color: str = DEFAULT_HIGHLIGHT_COLOR
    ) -> "Highlight":
        """Build a new highlight with a freshly generated id"""
        return cls(id=str(uuid.uuid4()), text=text, position=position, color=color)


class HighlightCreate(BaseModel):
    """Request model for highlighting a text selection"""

    selected_text: str
    color: str | None = None
    near_offset: int | None = None  # Caret/viewport hint for repeated text


class UpdateColorRequest(BaseModel):
    color: str


class Segment(BaseModel):
    """A contiguous run of text, either plain or highlighted"""

    text: str
    highlighted: bool = False
    color: str | None = None
    highlight_id: str | None = None


class HighlightSummary(BaseModel):
    """Highlight statistics for one book"""

    book_id: str
    highlights_count: int
    unresolved_count: int
    latest_highlight_text: str | None = None
