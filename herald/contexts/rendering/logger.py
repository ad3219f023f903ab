"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from herald.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path = None, templates_path: Path = None) -> Path:
    """
    Setup logger for rendering context.

    Args:
        log_dir: Directory for this rendering session (defaults to LOGS_PATH)
        templates_path: Template directory in use, recorded in the provenance header

    Returns:
        Path to log file
    """
    extra = {"Templates": templates_path} if templates_path else None
    return _setup_logger(context_name="render", log_dir=log_dir, extra_provenance=extra)


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_missing_category_class(category_id: str, fallback: str) -> None:
    """Log a category the host supplied no display class for."""
    _log_warning(f"No display class for category '{category_id}', using '{fallback}'")


def log_document_rendered(document, output_chars: int, elapsed_time: float) -> None:
    """Log a rendered document."""
    _log_debug(
        f"Rendered {len(document.paragraphs)} paragraph(s), "
        f"{len(document.highlights())} highlight(s) to {output_chars} chars "
        f"({elapsed_time * 1000:.1f} ms)"
    )


def log_legend_loaded(legend, config_path: Path) -> None:
    """Log a freshly loaded legend."""
    _log_info(f"Loaded {len(legend)} legend entries from {config_path}")


def log_legend_mismatch(error, config_path: Path) -> None:
    """Log a legend that does not correspond to the registry."""
    _log_error(f"Legend in {config_path} does not match the registry")
    for problem in error.problems:
        _log_error(f"  {problem}")
