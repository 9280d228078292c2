"""
Rendering context logger.

Logs with a [render] prefix. Rendering modules import from here, not from
utils.logger.
"""

from pathlib import Path
from typing import Iterable, Optional

from loguru import logger

from cvmiracle.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, template_choice: str, inputs: Optional[Iterable[Path]] = None) -> Path:
    """
    Log a render session to {log_dir}/render.log.

    Args:
        log_dir: Directory for this rendering session
        template_choice: Template requested for the page
        inputs: Original, rewritten or job-offer files being rendered

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        inputs=inputs,
        extra_provenance={"Template": template_choice},
    )


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_render_result(result) -> None:
    """
    Log a finished render.

    Args:
        result: BuildResult from build_intelligent_resume_html()
    """
    headings = ", ".join(section.heading for section in result.fit.sections) or "no sections"
    _log_debug(
        f"Rendered {result.variant} ({result.metadata.layout_type}): "
        f"{len(result.html)} chars, density {result.fit.density_class}"
    )
    _log_debug(f"  Sections: {headings}")
