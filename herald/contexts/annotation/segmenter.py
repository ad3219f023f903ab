"""
Priority-ordered, non-overlapping multi-pattern segmenter.

Splits one paragraph into typed segments by applying the category registry
in precedence order. Each category only ever sees text that no earlier
category has claimed, so precedence falls out of processing order, and every
split keeps exact substrings, so the segments always reassemble the input.

Segmentation runs on every render of user-supplied text. Every call runs
under a SegmentationBudget (steps and wall-clock time) and fails with
SegmentationBudgetExceeded instead of hanging. Matchers are compiled with the
`regex` package so a single search is interrupted when the remaining time
runs out, not only checked between searches.
"""

import os
import time
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from herald.contexts.annotation.categories import Category, CategoryRegistry, SpanKind
from herald.contexts.annotation.exceptions import SegmentationBudgetExceeded
from herald.contexts.annotation.segment_data_structures import Segment

load_dotenv()
DEFAULT_MAX_STEPS = int(os.getenv("HERALD_SEGMENT_MAX_STEPS", "50000"))
DEFAULT_MAX_SECONDS = float(os.getenv("HERALD_SEGMENT_MAX_MS", "250")) / 1000


class SegmentationBudget:
    """
    Step and wall-clock limit for one segmentation call.

    One step is one regex search or one forced advance past a zero-length
    match. The clock starts at the first step. Each search is also given the
    remaining time as its timeout, so one slow search cannot overrun the budget.
    """

    def __init__(self, max_steps: int = None, max_seconds: float = None):
        self.max_steps = DEFAULT_MAX_STEPS if max_steps is None else max_steps
        self.max_seconds = DEFAULT_MAX_SECONDS if max_seconds is None else max_seconds
        self.steps = 0
        self.text_length: Optional[int] = None
        self._started: Optional[float] = None

    @property
    def elapsed_seconds(self) -> float:
        if self._started is None:
            return 0.0
        return time.perf_counter() - self._started

    def start(self, text_length: int) -> None:
        """Reset counters for a new paragraph of the given length."""
        self.steps = 0
        self.text_length = text_length
        self._started = time.perf_counter()

    def tick(self) -> None:
        """
        Consume one step.

        Raises:
            SegmentationBudgetExceeded: If the step or time limit is exceeded
        """
        if self._started is None:
            self._started = time.perf_counter()

        self.steps += 1
        if self.steps > self.max_steps or self.elapsed_seconds > self.max_seconds:
            raise self.exceeded()

    @property
    def remaining_seconds(self) -> float:
        return self.max_seconds - self.elapsed_seconds

    def exceeded(self) -> SegmentationBudgetExceeded:
        """Build the error describing the current consumption."""
        return SegmentationBudgetExceeded(
            steps=self.steps,
            elapsed_seconds=self.elapsed_seconds,
            max_steps=self.max_steps,
            max_seconds=self.max_seconds,
            text_length=self.text_length,
        )

    def search(self, matcher, text: str, pos: int):
        """
        Run one search of a compiled `regex` pattern as one step.

        Raises:
            SegmentationBudgetExceeded: If the step limit is hit, or the time
                limit is hit before or during the search
        """
        self.tick()
        remaining = self.remaining_seconds
        if remaining <= 0:
            raise self.exceeded()
        try:
            return matcher.search(text, pos, timeout=remaining)
        except TimeoutError:
            raise self.exceeded() from None


@dataclass(frozen=True)
class _Piece:
    """Working slice of the paragraph; category is None while untyped."""

    text: str
    start: int
    category: Optional[Category] = None


def _split_piece(
    piece: _Piece, category: Category, matcher, budget: SegmentationBudget
) -> list[_Piece]:
    """
    Split one untyped piece on every non-overlapping match of matcher.

    The piece is scanned as its own string, leftmost match first; after each
    match the scan continues in the suffix. Zero-length matches are skipped by
    advancing one character.
    """
    text = piece.text
    pieces = []
    last_end = 0
    pos = 0

    while pos <= len(text):
        match = budget.search(matcher, text, pos)
        if match is None:
            break

        start, end = match.span()
        if start == end:
            budget.tick()
            pos = start + 1
            continue

        if start > last_end:
            pieces.append(_Piece(text[last_end:start], piece.start + last_end))
        pieces.append(_Piece(text[start:end], piece.start + start, category))
        last_end = pos = end

    if not pieces:
        return [piece]

    if last_end < len(text):
        pieces.append(_Piece(text[last_end:], piece.start + last_end))
    return pieces


def _to_segment(piece: _Piece) -> Segment:
    if piece.category is None:
        return Segment(text=piece.text, start=piece.start)

    kind = piece.category.kind
    return Segment(
        text=piece.text,
        start=piece.start,
        kind=kind,
        category_id=piece.category.id,
        href=kind.href_for(piece.text),
    )


def segment_paragraph(
    text: str,
    registry: CategoryRegistry,
    budget: Optional[SegmentationBudget] = None,
) -> tuple[Segment, ...]:
    """
    Segment one paragraph against a category registry.

    Categories are applied in precedence order, and within a category its
    patterns in listed order. Text claimed by a category is frozen: no later
    category or pattern re-examines it. Whatever is left untyped at the end
    becomes plain segments.

    Guarantees: the segment texts concatenate to `text`; segments are
    left-to-right over disjoint ranges; the result depends only on `text` and
    `registry`.

    Args:
        text: Paragraph text (a single line)
        registry: Category registry
        budget: Step/time budget. Defaults to a fresh SegmentationBudget

    Returns:
        Tuple of Segment in source order (empty for empty text)

    Raises:
        SegmentationBudgetExceeded: If the budget is exhausted

    Example:
        segments = segment_paragraph("Remote, 5+ years Python", registry)
        [(s.text, s.category_id) for s in segments]
        # [('Remote', 'work_arrangement'), (', ', None),
        #  ('5+ years', 'experience'), (' ', None), ('Python', 'programming')]
    """
    if not text:
        return ()

    if budget is None:
        budget = SegmentationBudget()
    budget.start(len(text))

    pieces = [_Piece(text, 0)]

    for category in registry:
        for matcher in category.matchers:
            refined = []
            for piece in pieces:
                if piece.category is not None:
                    refined.append(piece)
                else:
                    refined.extend(_split_piece(piece, category, matcher, budget))
            pieces = refined

    return tuple(_to_segment(piece) for piece in pieces)


def plain_segments(text: str) -> tuple[Segment, ...]:
    """Degraded output: the whole paragraph as a single plain segment."""
    if not text:
        return ()
    return (Segment(text=text, start=0, kind=SpanKind.PLAIN),)
