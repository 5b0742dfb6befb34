"""Highlight formatting for matched field text."""

from portfolio_search.models.search import HighlightSegment
from portfolio_search.retrieval.fuzzy import Span, merge_spans


class HighlightFormatter:
    """
    Splits field text into marked and unmarked segments.

    Segments always concatenate back to the original text, in order.
    """

    def __init__(self, open_tag: str = "<mark>", close_tag: str = "</mark>"):
        self.open_tag = open_tag
        self.close_tag = close_tag

    def segments(self, text: str, spans: list[Span] | None = None) -> list[HighlightSegment]:
        """Split ``text`` at the given match spans."""
        if not text:
            return [HighlightSegment(text="")]

        segments: list[HighlightSegment] = []
        cursor = 0
        for start, end in merge_spans(spans or []):
            start, end = max(start, cursor), min(end, len(text))
            if start >= end:
                continue
            if start > cursor:
                segments.append(HighlightSegment(text=text[cursor:start]))
            segments.append(HighlightSegment(text=text[start:end], matched=True))
            cursor = end

        if cursor < len(text):
            segments.append(HighlightSegment(text=text[cursor:]))
        return segments

    def to_markup(self, segments: list[HighlightSegment]) -> str:
        """Render segments with the configured tags around matched runs."""
        return "".join(
            f"{self.open_tag}{s.text}{self.close_tag}" if s.matched else s.text
            for s in segments
        )


ANSI_HIGHLIGHTER = HighlightFormatter(open_tag="\033[1;33m", close_tag="\033[0m")
