"""Custom exceptions for the annotation context with category references."""

from typing import Iterable, Optional


class CategoryConfigError(ValueError):
    """
    Exception raised when the category registry (or data tied to it) is inconsistent.

    Raised at registry construction or validation time. Hosts must not start
    serving with a registry that raised this error.

    Attributes:
        message: Error description
        category_ids: Identifiers of the offending categories
        problems: One line per detected problem
    """

    def __init__(
        self,
        message: str,
        category_ids: Optional[Iterable[str]] = None,
        problems: Optional[Iterable[str]] = None,
    ):
        self.message = message
        self.category_ids = list(dict.fromkeys(category_ids or []))
        self.problems = list(problems or [])

        parts = [message]

        if self.category_ids:
            parts.append(f"Offending categories: {', '.join(self.category_ids)}")

        for problem in self.problems:
            parts.append(f"  - {problem}")

        super().__init__("\n".join(parts))


class LegendMismatchError(CategoryConfigError):
    """
    Exception raised when legend entries are not in 1:1 correspondence with the registry.

    category_ids lists every id that is missing from the legend, unknown to the
    registry, or listed more than once.
    """

    pass


class SegmentationBudgetExceeded(Exception):
    """
    Exception raised when segmenting a paragraph exceeds its step or time budget.

    Attributes:
        steps: Steps consumed when the budget tripped
        elapsed_seconds: Wall-clock time consumed when the budget tripped
        max_steps: Configured step limit
        max_seconds: Configured time limit
        text_length: Length of the paragraph being segmented, if known
    """

    def __init__(
        self,
        steps: int,
        elapsed_seconds: float,
        max_steps: int,
        max_seconds: float,
        text_length: Optional[int] = None,
    ):
        self.steps = steps
        self.elapsed_seconds = elapsed_seconds
        self.max_steps = max_steps
        self.max_seconds = max_seconds
        self.text_length = text_length

        message = (
            f"Segmentation budget exceeded after {steps} steps "
            f"({elapsed_seconds * 1000:.1f} ms; limits: {max_steps} steps, "
            f"{max_seconds * 1000:.1f} ms)"
        )
        if text_length is not None:
            message += f" on {text_length} chars of text"

        super().__init__(message)
