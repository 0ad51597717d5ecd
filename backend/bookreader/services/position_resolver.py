"""
Position Resolver Module

Maps a selected text fragment to its zero-based character offset within a
document's full text.

Known limitation: when the fragment occurs more than once and no caret hint
is supplied, the first occurrence is used even if the reader selected a
later one.
"""

import logging

from ..models.highlights import POSITION_NOT_FOUND

logger = logging.getLogger(__name__)


def find_occurrences(full_text: str, selected_text: str) -> list[int]:
    """
    Return the start offset of every occurrence of selected_text, including
    occurrences that overlap each other ("aa" in "aaa" -> [0, 1]).
    """
    if not selected_text:
        return []

    offsets = []
    start = full_text.find(selected_text)
    while start != -1:
        offsets.append(start)
        start = full_text.find(selected_text, start + 1)
    return offsets


def resolve_position(
    full_text: str, selected_text: str, near_offset: int | None = None
) -> int:
    """
    Resolve the offset of a selected fragment.

    Args:
        full_text (str): The document's full text
        selected_text (str): The fragment the user selected
        near_offset (int | None): Optional caret/viewport offset. When given,
            the occurrence starting closest to it wins (ties go to the
            earlier occurrence).

    Returns:
        int: Offset of the chosen occurrence, or -1 if the fragment does not
        occur verbatim in the text
    """
    if not selected_text:
        return POSITION_NOT_FOUND

    if near_offset is None:
        position = full_text.find(selected_text)
    else:
        occurrences = find_occurrences(full_text, selected_text)
        if occurrences:
            position = min(occurrences, key=lambda offset: abs(offset - near_offset))
        else:
            position = POSITION_NOT_FOUND

    if position == POSITION_NOT_FOUND:
        logger.debug(
            f"Selected text of length {len(selected_text)} not found in document"
        )
    return position
