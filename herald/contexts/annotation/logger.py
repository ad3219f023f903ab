"""
Annotation context logger.

Provides logging interface for annotation context with automatic [annotate] prefix.
All annotation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from herald.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[annotate]"


def setup_annotation_logger(log_dir: Path = None, categories_path: Path = None) -> Path:
    """
    Setup logger for annotation context.

    Configures loguru with provenance tracking and annotation-specific context.

    Args:
        log_dir: Directory for this annotation session (defaults to LOGS_PATH)
        categories_path: Category config in use, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from herald.contexts.annotation.logger import setup_annotation_logger

        log_file = setup_annotation_logger(log_dir)
    """
    extra = {"Categories": categories_path} if categories_path else None
    return _setup_logger(context_name="annotate", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [annotate] prefix


def _log_info(message: str) -> None:
    """Log info message with [annotate] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [annotate] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [annotate] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [annotate] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level annotation-specific logging helpers


def log_registry_loaded(registry, config_path: Path) -> None:
    """Log a freshly loaded category registry."""
    _log_info(f"Loaded {len(registry)} categories from {config_path}")
    _log_debug(f"  Precedence: {', '.join(registry.ids)}")


def log_registry_invalid(error, config_path: Path) -> None:
    """Log a registry that failed validation, one line per problem."""
    _log_error(f"Invalid category registry in {config_path}: {error.message}")
    for problem in error.problems:
        _log_error(f"  {problem}")


def log_budget_exceeded(paragraph_index: int, error) -> None:
    """
    Log a paragraph that fell back to plain text.

    Args:
        paragraph_index: Position of the paragraph in the document
        error: SegmentationBudgetExceeded raised by the segmenter
    """
    _log_warning(f"Paragraph {paragraph_index} rendered as plain text: {error}")


def log_document_segmented(document, elapsed_time: float) -> None:
    """Log a summary of a segmented document."""
    counts = document.category_counts()
    summary = ", ".join(f"{category_id}={count}" for category_id, count in counts.items())
    _log_debug(
        f"Segmented {len(document.paragraphs)} paragraph(s) in {elapsed_time * 1000:.1f} ms"
        + (f" ({summary})" if summary else "")
    )
    if document.degraded_paragraphs:
        _log_warning(
            f"{len(document.degraded_paragraphs)} paragraph(s) degraded to plain text: "
            f"{list(document.degraded_paragraphs)}"
        )
