"""Approximate string matching used to score record fields.

A pattern matches a text when it occurs in it as a case-insensitive
substring, or as an approximate substring within an edit budget of
``threshold * len(pattern)``. Multi-word queries that do not match as a
whole fall back to matching each word on its own.

Approximate search uses Myers' bit-parallel edit distance on Python ints,
restricted to the text windows around exact occurrences of pattern pieces.
Splitting the pattern into ``max_errors + 1`` pieces guarantees that any
alignment within budget contains at least one piece unchanged.
"""

import re
from dataclasses import dataclass, field

Span = tuple[int, int]

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.95
WORD_START_SCORE = 0.9
SUBSTRING_SCORE = 0.85
APPROXIMATE_SCORE = 0.8
TOKEN_FALLBACK_FACTOR = 0.75

# Longer phrases skip the approximate pass and are matched word by word.
MAX_APPROXIMATE_LENGTH = 32

_WORD_CHAR = re.compile(r"\w")
_IRREGULAR_SPACE = re.compile(r"\s{2,}|[^\S ]")


@dataclass
class FieldMatch:
    """Outcome of matching one pattern against one field value.

    ``spans`` are half-open ``(start, end)`` offsets into the original text.
    """

    score: float
    spans: list[Span] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.score > 0


NO_MATCH = FieldMatch(score=0.0)


@dataclass(frozen=True)
class FoldedText:
    """Lowercased text with whitespace runs collapsed to one space.

    ``offsets[i]`` is the index in the original text of folded character
    ``i``; None means the folded text lines up with the original.
    """

    text: str
    offsets: list[int] | None = None

    def to_original(self, start: int, end: int) -> Span:
        if self.offsets is None:
            return start, end
        return self.offsets[start], self.offsets[end - 1] + 1


def fold(text: str) -> FoldedText:
    """Fold ``text`` for matching while remembering original offsets."""
    if text.isascii() and not _IRREGULAR_SPACE.search(text):
        return FoldedText(text.lower())

    chars: list[str] = []
    offsets: list[int] = []
    previous_space = False
    for index, char in enumerate(text):
        if char.isspace():
            if not previous_space:
                chars.append(" ")
                offsets.append(index)
            previous_space = True
            continue
        previous_space = False
        # Some characters lowercase to more than one code point, e.g. "İ".
        for lowered in char.lower():
            chars.append(lowered)
            offsets.append(index)
    return FoldedText("".join(chars), offsets)


class FuzzyMatcher:
    """
    Case-insensitive approximate substring matcher.

    Args:
        threshold: Fraction of the pattern length allowed as edit distance
        min_match_length: Spans shorter than this are never reported
    """

    def __init__(self, threshold: float = 0.3, min_match_length: int = 2):
        self.threshold = threshold
        self.min_match_length = min_match_length

    def match(self, pattern: str, text: str | None) -> FieldMatch:
        """Match ``pattern`` against ``text`` and score the best alignment."""
        if not text:
            return NO_MATCH
        needle = " ".join(pattern.lower().split())
        if len(needle) < self.min_match_length:
            return NO_MATCH

        folded = fold(text)
        result = self._match_phrase(needle, folded)
        if result.matched:
            return result

        tokens = [t for t in needle.split(" ") if len(t) >= self.min_match_length]
        if len(tokens) < 2:
            return NO_MATCH
        return self._match_tokens(tokens, folded)

    def _match_phrase(self, needle: str, folded: FoldedText) -> FieldMatch:
        haystack = folded.text

        if haystack.strip() == needle:
            start = len(haystack) - len(haystack.lstrip())
            return FieldMatch(EXACT_SCORE, [folded.to_original(start, start + len(needle))])

        found = [(m.start(), m.end()) for m in re.finditer(re.escape(needle), haystack)]
        if found:
            first = found[0][0]
            if haystack[:first].strip() == "":
                score = PREFIX_SCORE
            elif not _WORD_CHAR.match(haystack[first - 1]):
                score = WORD_START_SCORE
            else:
                score = SUBSTRING_SCORE
            return FieldMatch(score, [folded.to_original(s, e) for s, e in found])

        max_errors = int(len(needle) * self.threshold)
        if max_errors == 0 or len(needle) > MAX_APPROXIMATE_LENGTH:
            return NO_MATCH
        approximate = approximate_find(needle, haystack, max_errors)
        if approximate is None:
            return NO_MATCH
        errors, start, end = approximate
        if end - start < self.min_match_length:
            return NO_MATCH
        score = APPROXIMATE_SCORE * (1 - errors / (len(needle) + 1))
        return FieldMatch(score, [folded.to_original(start, end)])

    def _match_tokens(self, tokens: list[str], folded: FoldedText) -> FieldMatch:
        total = 0.0
        spans: list[Span] = []
        for token in tokens:
            result = self._match_phrase(token, folded)
            total += result.score
            spans.extend(result.spans)
        if not spans:
            return NO_MATCH
        return FieldMatch(TOKEN_FALLBACK_FACTOR * total / len(tokens), merge_spans(spans))

    def best_of(self, pattern: str, values: list[str]) -> tuple[FieldMatch, list[FieldMatch]]:
        """Match every value of a multi-valued field; return the best and all matches."""
        matches = [self.match(pattern, value) for value in values]
        best = max(matches, key=lambda m: m.score, default=NO_MATCH)
        return best, matches


def approximate_find(pattern: str, text: str, max_errors: int) -> tuple[int, int, int] | None:
    """
    Find the substring of ``text`` closest to ``pattern`` by edit distance.

    Returns:
        ``(errors, start, end)`` of the leftmost best alignment, or None when
        every alignment needs more than ``max_errors`` edits
    """
    m = len(pattern)
    if m == 0:
        return None
    if max_errors >= m:
        windows = [(0, len(text))]
    else:
        windows = _candidate_windows(pattern, text, max_errors)

    masks: dict[str, int] = {}
    for i, char in enumerate(pattern):
        masks[char] = masks.get(char, 0) | (1 << i)

    best: tuple[int, int] | None = None
    for window_start, window_end in windows:
        found = _scan(masks, m, text[window_start:window_end], max_errors)
        if found is not None and (best is None or found[0] < best[0]):
            best = (found[0], window_start + found[1])
            if best[0] == 0:
                break

    if best is None:
        return None
    errors, end = best
    return errors, _alignment_start(pattern, text, end, errors), end


def _candidate_windows(pattern: str, text: str, max_errors: int) -> list[Span]:
    m = len(pattern)
    size, extra = divmod(m, max_errors + 1)
    windows: list[Span] = []
    offset = 0
    for index in range(max_errors + 1):
        piece = pattern[offset : offset + size + (1 if index < extra else 0)]
        position = text.find(piece)
        while position != -1:
            origin = position - offset
            windows.append(
                (max(0, origin - max_errors), min(len(text), origin + m + 2 * max_errors))
            )
            position = text.find(piece, position + 1)
        offset += len(piece)
    return merge_spans(windows)


def _scan(masks: dict[str, int], m: int, text: str, max_errors: int) -> tuple[int, int] | None:
    """Return ``(errors, end)`` of the first end position with the fewest errors."""
    full = (1 << m) - 1
    last = 1 << (m - 1)
    positive, negative, score = full, 0, m
    best: tuple[int, int] | None = None

    for j, char in enumerate(text, 1):
        eq = masks.get(char, 0)
        xv = eq | negative
        xh = ((((eq & positive) + positive) & full) ^ positive) | eq
        ph = negative | (~(xh | positive) & full)
        mh = positive & xh
        if ph & last:
            score += 1
        elif mh & last:
            score -= 1
        # Row 0 stays zero so an alignment may start anywhere.
        ph = (ph << 1) & full
        mh = (mh << 1) & full
        positive = mh | (~(xv | ph) & full)
        negative = ph & xv
        if score <= max_errors and (best is None or score < best[0]):
            best = (score, j)
            if score == 0:
                break
    return best


def _alignment_start(pattern: str, text: str, end: int, errors: int) -> int:
    """Return the start of the shortest alignment ending at ``end`` within ``errors``."""
    m = len(pattern)
    window = text[max(0, end - m - errors) : end][::-1]
    reversed_pattern = pattern[::-1]
    column = list(range(m + 1))
    for length, char in enumerate(window, 1):
        diagonal, column[0] = column[0], length
        for i in range(1, m + 1):
            above = column[i]
            column[i] = min(
                diagonal + (reversed_pattern[i - 1] != char),
                above + 1,
                column[i - 1] + 1,
            )
            diagonal = above
        if column[m] <= errors:
            return end - length
    return end - len(window)


def merge_spans(spans: list[Span]) -> list[Span]:
    """Sort spans and merge overlapping or touching ranges."""
    merged: list[Span] = []
    for start, end in sorted(spans):
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged
