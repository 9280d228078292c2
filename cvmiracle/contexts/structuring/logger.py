"""
Structuring context logger.

Logs with a [structure] prefix. Structuring modules import from here, not
from utils.logger.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from cvmiracle.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[structure]"


def setup_structuring_logger(log_dir: Path, inputs: Optional[Iterable[Path]] = None) -> Path:
    """
    Log a structuring session to {log_dir}/structure.log.

    Args:
        log_dir: Directory for this logging session
        inputs: Résumé and job-offer files being parsed

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="structure",
        log_dir=log_dir,
        inputs=inputs,
        extra_provenance={
            "LLM provider": os.getenv("LLM_PROVIDER", "openai"),
            "LLM model": os.getenv("LLM_MODEL") or "provider default",
        },
    )


def _log_info(message: str) -> None:
    """Log info message with [structure] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [structure] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [structure] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_ai_failure(operation: str, error: str) -> None:
    """Log an AI extraction failure that will fall back to heuristics."""
    _log_warning(f"{operation} unavailable, using heuristic output: {error}")


def log_preview_result(preview) -> None:
    """
    Log a structure preview summary.

    Args:
        preview: StructurePreview from build_structure_preview()
    """
    _log_info(
        f"Structure preview ({preview.source}): "
        f"{len(preview.structured_cv.experiences)} experiences, "
        f"confidence {preview.confidence.global_score}"
    )
    for warning in preview.overlap_warnings:
        _log_warning(f"  Date overlap: {warning}")
    for suggestion in preview.suggested_improvements:
        _log_debug(f"  Suggestion: {suggestion}")
