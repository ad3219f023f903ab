"""
Paragraph splitting and document segmentation for the Annotation context.

A description is split on line breaks. Each non-blank line is segmented on its
own; blank lines become spacers so the rendered output keeps the original
vertical rhythm.

segment_document() is the entry point hosts call with raw description text.
"""

import re
import time
from typing import Callable, Optional

from herald.contexts.annotation.categories import CategoryRegistry, get_default_registry
from herald.contexts.annotation.exceptions import SegmentationBudgetExceeded
from herald.contexts.annotation.logger import log_budget_exceeded, log_document_segmented
from herald.contexts.annotation.segment_data_structures import Document, Paragraph
from herald.contexts.annotation.segmenter import (
    SegmentationBudget,
    plain_segments,
    segment_paragraph,
)

# \r\n first so Windows line endings don't produce an extra blank line
LINE_BREAK = re.compile(r"\r\n|\r|\n")


def is_blank_line(line: str) -> bool:
    return not line.strip()


def split_paragraphs(text: str, collapse_blank_lines: bool = False) -> list[str]:
    """
    Split text into lines, keeping blank lines as their own units.

    Args:
        text: Raw description text
        collapse_blank_lines: Merge each run of blank lines into one unit

    Returns:
        List of lines in source order. Line text is untouched (no stripping).

    Example:
        split_paragraphs("First\\n\\n\\nSecond")
        # ['First', '', '', 'Second']

        split_paragraphs("First\\n\\n\\nSecond", collapse_blank_lines=True)
        # ['First', '', 'Second']
    """
    lines = LINE_BREAK.split(text)

    if not collapse_blank_lines:
        return lines

    collapsed = []
    for line in lines:
        if is_blank_line(line) and collapsed and is_blank_line(collapsed[-1]):
            continue
        collapsed.append(line)
    return collapsed


def segment_document(
    text: str,
    registry: Optional[CategoryRegistry] = None,
    budget_factory: Optional[Callable[[], SegmentationBudget]] = None,
    collapse_blank_lines: bool = False,
) -> Document:
    """
    Split a description into paragraphs and segment each text paragraph.

    A paragraph whose segmentation exceeds its budget is logged and returned
    as a single plain segment (marked degraded); the rest of the document is
    unaffected.

    Args:
        text: Raw description text
        registry: Category registry. Defaults to the process-wide registry
        budget_factory: Builds one budget per paragraph. Defaults to
                        SegmentationBudget with environment limits
        collapse_blank_lines: Merge runs of blank lines into one spacer

    Returns:
        Document with one Paragraph per line (or per blank run)

    Example:
        document = segment_document("Remote role\\n\\nEmail jobs@acme.io")
        [p.is_blank for p in document.paragraphs]
        # [False, True, False]
    """
    if registry is None:
        registry = get_default_registry()
    if budget_factory is None:
        budget_factory = SegmentationBudget

    started = time.perf_counter()
    paragraphs = []

    for index, line in enumerate(split_paragraphs(text, collapse_blank_lines)):
        if is_blank_line(line):
            paragraphs.append(Paragraph(text=line, is_blank=True))
            continue

        try:
            segments = segment_paragraph(line, registry, budget_factory())
        except SegmentationBudgetExceeded as e:
            log_budget_exceeded(index, e)
            paragraphs.append(Paragraph(text=line, segments=plain_segments(line), degraded=True))
            continue

        paragraphs.append(Paragraph(text=line, segments=segments))

    document = Document(source_text=text, paragraphs=tuple(paragraphs))
    log_document_segmented(document, time.perf_counter() - started)
    return document
