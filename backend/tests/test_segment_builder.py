"""
Unit tests for the segment builder.

Tests cover:
- Plain and highlighted alternation for the reference scenarios
- Overlapping highlights (no clipping by default, optional clipping)
- Exclusion of unresolved highlights
- Ordering and stable tie-breaking
- Idempotence and text coverage
"""

from bookreader.models.highlights import Highlight, Segment
from bookreader.services.position_resolver import resolve_position
from bookreader.services.segment_builder import build_segments, segments_text

TEXT = "The quick brown fox"
YELLOW = "#FFEB3B"


def highlight(hid: str, text: str, position: int, color: str = YELLOW) -> Highlight:
    return Highlight(id=hid, text=text, position=position, color=color)


class TestReferenceScenarios:
    def test_single_highlight(self):
        """Scenario A: one highlight in the middle of the text"""
        segments = build_segments(TEXT, [highlight("h1", "quick", 4)])

        assert segments == [
            Segment(text="The "),
            Segment(text="quick", highlighted=True, color=YELLOW, highlight_id="h1"),
            Segment(text=" brown fox"),
        ]

    def test_highlight_ending_at_text_end(self):
        """Scenario B: no trailing plain segment when the last highlight ends the text"""
        segments = build_segments(
            TEXT, [highlight("h1", "quick", 4), highlight("h2", "fox", 16)]
        )

        assert [(s.text, s.highlighted) for s in segments] == [
            ("The ", False),
            ("quick", True),
            (" brown ", False),
            ("fox", True),
        ]

    def test_overlapping_highlights_are_not_clipped(self):
        """Scenario C: the shared word is rendered twice"""
        segments = build_segments(
            TEXT,
            [highlight("h1", "quick brown", 4), highlight("h2", "brown fox", 10)],
        )

        assert [(s.text, s.highlighted) for s in segments] == [
            ("The ", False),
            ("quick brown", True),
            ("brown fox", True),
        ]
        assert segments_text(segments) == "The quick brownbrown fox"


class TestClipping:
    def test_partial_overlap_is_trimmed(self):
        segments = build_segments(
            TEXT,
            [highlight("h1", "quick brown", 4), highlight("h2", "brown fox", 10)],
            clip_overlaps=True,
        )

        assert [(s.text, s.highlighted) for s in segments] == [
            ("The ", False),
            ("quick brown", True),
            (" fox", True),
        ]
        assert segments_text(segments) == TEXT

    def test_fully_covered_highlight_is_dropped(self):
        segments = build_segments(
            TEXT,
            [highlight("h1", "quick brown", 4), highlight("h2", "brown", 10)],
            clip_overlaps=True,
        )

        assert [s.highlight_id for s in segments if s.highlighted] == ["h1"]
        assert segments[-1] == Segment(text=" fox")

    def test_clipping_without_overlap_matches_default(self):
        highlights = [highlight("h1", "quick", 4), highlight("h2", "fox", 16)]
        assert build_segments(TEXT, highlights, clip_overlaps=True) == build_segments(
            TEXT, highlights
        )


class TestExclusion:
    def test_unresolved_highlight_is_skipped(self):
        segments = build_segments(
            TEXT, [highlight("missing", "wolf", -1), highlight("h1", "quick", 4)]
        )

        assert all(s.highlight_id != "missing" for s in segments)
        assert segments == build_segments(TEXT, [highlight("h1", "quick", 4)])

    def test_only_unresolved_highlights_render_plain_text(self):
        assert build_segments(TEXT, [highlight("missing", "wolf", -1)]) == [
            Segment(text=TEXT)
        ]

    def test_no_highlights(self):
        assert build_segments(TEXT, []) == [Segment(text=TEXT)]

    def test_empty_text(self):
        assert build_segments("", []) == []


class TestOrdering:
    def test_segments_follow_source_order_regardless_of_insertion(self):
        segments = build_segments(
            TEXT, [highlight("h2", "fox", 16), highlight("h1", "The", 0)]
        )

        assert [s.highlight_id for s in segments if s.highlighted] == ["h1", "h2"]
        assert segments[0].text == "The"

    def test_equal_positions_keep_insertion_order(self):
        segments = build_segments(
            TEXT,
            [highlight("first", "quick", 4, "#111111"), highlight("second", "quick", 4, "#222222")],
        )

        assert [s.highlight_id for s in segments if s.highlighted] == [
            "first",
            "second",
        ]

    def test_stored_text_is_rendered_instead_of_document_slice(self):
        segments = build_segments(TEXT, [highlight("h1", "QUICK", 4)])
        assert segments[1].text == "QUICK"
        assert segments[2].text == " brown fox"


class TestProperties:
    def test_build_is_idempotent(self):
        highlights = [highlight("h1", "quick brown", 4), highlight("h2", "brown fox", 10)]
        assert build_segments(TEXT, highlights) == build_segments(TEXT, highlights)

    def test_resolved_highlights_cover_the_document(self):
        document = "It was the best of times, it was the worst of times."
        highlights = []
        for index, fragment in enumerate(["best", "worst of times", "It was"]):
            position = resolve_position(document, fragment)
            assert document[position : position + len(fragment)] == fragment
            highlights.append(highlight(f"h{index}", fragment, position))

        assert segments_text(build_segments(document, highlights)) == document
