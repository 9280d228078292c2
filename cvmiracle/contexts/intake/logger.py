"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from loguru import logger

CONTEXT_PREFIX = "[intake]"


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_segmentation_result(sections: list) -> None:
    """Log the headings produced by the section segmenter."""
    _log_debug(f"Segmented {len(sections)} sections")
    for section in sections:
        _log_debug(f"  {section.heading}: {len(section.lines)} lines")


def log_experience_result(entries: list, used_fallback: bool) -> None:
    """Log experience entry parsing outcome."""
    if used_fallback:
        _log_debug(f"Experience fallback recovered {len(entries)} entries")
    else:
        _log_debug(f"Parsed {len(entries)} experience entries")
