"""
Logging setup shared by the pipeline contexts.

Each context wraps setup_logger() in contexts/{context}/logger.py. A session
writes one {context}.log file whose header records what produced it: the
command line, the résumé and job-offer inputs, and the configuration
overrides in effect, so a rendered page can be traced back to its sources.
"""

import os
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

from dotenv import load_dotenv
from loguru import logger

from cvmiracle import __version__

load_dotenv()

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <7} | {message}"
CONSOLE_FORMAT = "<level>{level: <7}</level> | <level>{message}</level>"
HEADER_RULE = "=" * 80


def setup_logger(
    context_name: str,
    log_dir: Path,
    inputs: Optional[Iterable[Path]] = None,
    extra_provenance: Optional[Dict[str, object]] = None,
    console_level: str = "INFO",
) -> Path:
    """
    Send a context's logs to {log_dir}/{context_name}.log and stderr.

    The file gets everything from DEBUG up; stderr only console_level and
    above, so stdout stays free for JSON or HTML output.

    Args:
        context_name: Context identifier ("structure", "layout", "render")
        log_dir: Directory for this logging session
        inputs: Input files described in the provenance header
        extra_provenance: Additional key-value pairs for the header
        console_level: Lowest level shown on stderr

    Returns:
        Path to log file

    Example:
        log_file = setup_logger(
            "layout",
            Path("outs/logs/fit_20260114_123456"),
            inputs=[Path("resume.txt")],
            extra_provenance={"Template": "Minimal ATS"},
        )
    """
    log_dir.mkdir(exist_ok=True, parents=True)
    log_file = log_dir / f"{context_name}.log"

    logger.remove()
    logger.add(log_file, format=FILE_FORMAT, level="DEBUG", encoding="utf-8")
    logger.add(sys.stderr, format=CONSOLE_FORMAT, level=console_level, colorize=True)

    log_provenance(context_name, inputs, extra_provenance)

    return log_file


def describe_input(path: Path) -> str:
    """
    One-line summary of an input file for the provenance header.

    Example:
        >>> describe_input(Path("missing.txt"))
        'missing.txt (not found)'
    """
    if not path.is_file():
        return f"{path} (not found)"
    text = path.read_text(encoding="utf-8", errors="replace")
    return f"{path} ({len(text)} chars, {len(text.splitlines())} lines)"


def log_provenance(
    context_name: str,
    inputs: Optional[Iterable[Path]] = None,
    extra_context: Optional[Dict[str, object]] = None,
) -> None:
    """Log the session header: command, inputs and config sources."""
    logger.info(HEADER_RULE)
    logger.info(f"cvmiracle {__version__} [{context_name}]")
    logger.info(f"Command: {' '.join(sys.argv)}")
    logger.info(f"Working directory: {Path.cwd()}")
    logger.info(f"Python: {sys.version.split()[0]}")
    logger.info(f"Config overrides: {os.getenv('CVMIRACLE_CONFIG_DIR') or 'packaged defaults'}")

    for path in inputs or ():
        logger.info(f"Input: {describe_input(Path(path))}")

    for key, value in (extra_context or {}).items():
        logger.info(f"{key}: {value}")

    logger.info(HEADER_RULE)
