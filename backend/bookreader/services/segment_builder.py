"""
Segment Builder Module

Turns a document's full text plus its highlights into the ordered sequence
of plain and highlighted runs that the reader view renders.
"""

from typing import Iterable

from ..models.highlights import Highlight, Segment


def build_segments(
    full_text: str, highlights: Iterable[Highlight], clip_overlaps: bool = False
) -> list[Segment]:
    """
    Build the render sequence for a document.

    Highlights that could not be located (position -1) are skipped. The rest
    are walked in ascending position order (stable, so equal positions keep
    insertion order). A highlighted segment always carries the highlight's
    stored text, not a slice of full_text.

    Without clipping, a highlight that starts inside an earlier highlight is
    still emitted whole, so overlapping highlights render the shared text
    twice. With clip_overlaps=True the covered part is trimmed off and fully
    covered highlights are dropped.

    Args:
        full_text (str): The document's full text
        highlights (Iterable[Highlight]): Highlights in insertion order
        clip_overlaps (bool): Trim highlights that overlap an earlier one

    Returns:
        list[Segment]: Segments in source order
    """
    located = sorted(
        (highlight for highlight in highlights if highlight.is_located),
        key=lambda highlight: highlight.position,
    )

    segments: list[Segment] = []
    last_index = 0

    for highlight in located:
        text = highlight.text
        if highlight.position > last_index:
            segments.append(
                Segment(text=full_text[last_index : highlight.position])
            )
        elif clip_overlaps and highlight.position < last_index:
            text = text[last_index - highlight.position :]
            if not text:
                continue

        segments.append(
            Segment(
                text=text,
                highlighted=True,
                color=highlight.color,
                highlight_id=highlight.id,
            )
        )
        if clip_overlaps:
            last_index = max(last_index, highlight.end)
        else:
            last_index = highlight.end

    if last_index < len(full_text):
        segments.append(Segment(text=full_text[last_index:]))

    return segments


def segments_text(segments: Iterable[Segment]) -> str:
    """Concatenate the text of a segment sequence"""
    return "".join(segment.text for segment in segments)
