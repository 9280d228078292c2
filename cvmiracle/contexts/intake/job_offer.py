"""
Preparation of scraped job-offer text and extracted résumé text.

Both inputs arrive already extracted by external collaborators; this module
only enforces the size limits and cleanliness the pipeline relies on.
"""

from cvmiracle.contexts.intake.exceptions import InvalidJobOfferError
from cvmiracle.contexts.intake.logger import _log_debug
from cvmiracle.contexts.intake.normalizer import normalize_unicode
from cvmiracle.utils.text_processing import collapse_whitespace

MAX_INPUT_CHARS = 20000
MIN_JOB_OFFER_CHARS = 120
MAX_TITLE_CHARS = 80
DEFAULT_APPLICATION_TITLE = "Application optimisée"


def clean_job_offer_text(text: str) -> str:
    """
    Collapse whitespace in a job offer and cap it to 20,000 characters.

    Args:
        text: Scraped job-offer body

    Returns:
        Single-line cleaned text

    Raises:
        InvalidJobOfferError: If fewer than 120 characters remain
    """
    clean = collapse_whitespace(normalize_unicode(text or ""))
    if len(clean) < MIN_JOB_OFFER_CHARS:
        raise InvalidJobOfferError(len(clean), MIN_JOB_OFFER_CHARS)
    if len(clean) > MAX_INPUT_CHARS:
        _log_debug(f"Job offer truncated from {len(clean)} to {MAX_INPUT_CHARS} characters")
    return clean[:MAX_INPUT_CHARS]


def prepare_resume_text(text: str) -> str:
    """
    Cap extracted résumé text to 20,000 characters, keeping line breaks.

    Windows line endings are normalized so line-based heuristics see one
    line per row.
    """
    clean = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    return clean[:MAX_INPUT_CHARS]


def infer_application_title(job_text: str) -> str:
    """
    Derive a short application title from the first sentence of a job offer.

    Example:
        >>> infer_application_title("Senior Data Engineer. Join our team...")
        'Senior Data Engineer'
        >>> infer_application_title("")
        'Application optimisée'
    """
    first_sentence = (job_text or "").split(".")[0].strip()
    return first_sentence[:MAX_TITLE_CHARS] if first_sentence else DEFAULT_APPLICATION_TITLE
