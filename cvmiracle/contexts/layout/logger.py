"""
Layout context logger.

Logs with a [layout] prefix. Layout modules import from here, not from
utils.logger.
"""

import os
from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from cvmiracle.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[layout]"


def setup_layout_logger(
    log_dir: Path, template_choice: Optional[str] = None, inputs: Optional[Iterable[Path]] = None
) -> Path:
    """
    Log a layout or page-fit session to {log_dir}/layout.log.

    Args:
        log_dir: Directory for this logging session
        template_choice: Template whose hints and budget apply
        inputs: Résumé files being analyzed

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="layout",
        log_dir=log_dir,
        inputs=inputs,
        extra_provenance={
            "Template": template_choice or "none",
            "Page-fit override": os.getenv("PAGE_FIT_CONFIG_PATH") or "none",
        },
    )


def _log_warning(message: str) -> None:
    """Log warning message with [layout] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [layout] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_layout_result(metadata, cache_hit: bool) -> None:
    """Log detected layout metadata."""
    source = "cache" if cache_hit else "detected"
    _log_debug(
        f"Layout ({source}): {metadata.layout_type}, spacing {metadata.spacing_profile}, "
        f"rhythm {metadata.spacing_rhythm}, headings {metadata.heading_capitalization}"
    )


def log_fit_result(result) -> None:
    """
    Log page-fit outcome.

    Args:
        result: FitResult from fit_sections_for_one_page()
    """
    _log_debug(
        f"Page fit: {result.units:.1f}/{result.budget} units, density {result.density_class}, "
        f"{result.removed_lines} lines removed"
    )
    if result.units > result.budget:
        _log_warning(f"Content still exceeds one page after trimming ({result.units:.1f}/{result.budget} units)")
