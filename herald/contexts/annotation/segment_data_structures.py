"""
Segment and document data structures for the Annotation context.

Segments are the atomic output of the segmenter: exact slices of a paragraph
tagged with a category (or plain). A Document is the ordered list of
paragraphs of one description, each either a text unit with its segments or a
blank spacer.

All structures are frozen and created fresh per segmentation call.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from herald.contexts.annotation.categories import SpanKind


@dataclass(frozen=True)
class Segment:
    """
    A contiguous slice of paragraph text.

    Attributes:
        text: Exact substring of the paragraph
        start: Offset of the first character within the paragraph
        kind: PLAIN for untyped text, otherwise the category's span kind
        category_id: Category that claimed this text (None for plain text)
        href: Navigable target for EMAIL and LINK segments
    """

    text: str
    start: int
    kind: SpanKind = SpanKind.PLAIN
    category_id: Optional[str] = None
    href: Optional[str] = None

    @property
    def end(self) -> int:
        return self.start + len(self.text)

    @property
    def is_plain(self) -> bool:
        return self.kind is SpanKind.PLAIN


@dataclass(frozen=True)
class Paragraph:
    """
    One line of the source text.

    Blank paragraphs (empty or whitespace-only lines) are spacers and carry no
    segments.
    """

    text: str
    segments: tuple[Segment, ...] = ()
    is_blank: bool = False
    degraded: bool = False

    @property
    def highlights(self) -> tuple[Segment, ...]:
        """Segments claimed by a category."""
        return tuple(segment for segment in self.segments if not segment.is_plain)


@dataclass(frozen=True)
class Document:
    """
    Ordered paragraphs of one description.

    Attributes:
        source_text: Text the document was built from
        paragraphs: Text units and blank spacers in source order
    """

    source_text: str
    paragraphs: tuple[Paragraph, ...] = field(default_factory=tuple)

    @property
    def degraded_paragraphs(self) -> tuple[int, ...]:
        """Indexes of paragraphs that fell back to plain text."""
        return tuple(i for i, paragraph in enumerate(self.paragraphs) if paragraph.degraded)

    def segments(self) -> list[Segment]:
        """All segments of all text paragraphs, in order."""
        return [segment for paragraph in self.paragraphs for segment in paragraph.segments]

    def highlights(self) -> list[Segment]:
        """All category-tagged segments, in order."""
        return [segment for segment in self.segments() if not segment.is_plain]

    def category_counts(self) -> dict[str, int]:
        """Number of highlighted segments per category id, in order of first appearance."""
        return dict(Counter(segment.category_id for segment in self.highlights()))
