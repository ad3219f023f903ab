"""
Annotation Context

Responsibilities:
- Holds the ordered category registry (salary, benefits, skills, emails, URLs, ...)
- Validates category matchers at startup
- Splits description text into paragraphs and segments each paragraph into
  non-overlapping typed segments

Owns: Category registry, segmentation algorithm, segment/document data model
Never: Produces display output or decides styling
"""

from herald.contexts.annotation.categories import (
    Category,
    CategoryRegistry,
    SpanKind,
    get_default_registry,
    load_registry,
)
from herald.contexts.annotation.exceptions import (
    CategoryConfigError,
    LegendMismatchError,
    SegmentationBudgetExceeded,
)
from herald.contexts.annotation.paragraphs import segment_document, split_paragraphs
from herald.contexts.annotation.segment_data_structures import Document, Paragraph, Segment
from herald.contexts.annotation.segmenter import SegmentationBudget, segment_paragraph

__all__ = [
    # Registry
    "Category",
    "CategoryRegistry",
    "SpanKind",
    "load_registry",
    "get_default_registry",
    # Segmentation
    "segment_document",
    "segment_paragraph",
    "split_paragraphs",
    "SegmentationBudget",
    # Data structures
    "Document",
    "Paragraph",
    "Segment",
    # Errors
    "CategoryConfigError",
    "LegendMismatchError",
    "SegmentationBudgetExceeded",
]
