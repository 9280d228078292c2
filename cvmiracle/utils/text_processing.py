"""
Text processing utilities shared across contexts.
"""

import re
from typing import Any, Iterable, List


def coerce_text(value: Any) -> str:
    """
    Convert an arbitrary value to a trimmed string.

    None becomes "". Non-string scalars are stringified so that malformed
    input (numbers, booleans) still yields usable text.

    Example:
        >>> coerce_text("  Acme ")
        'Acme'
        >>> coerce_text(None)
        ''
        >>> coerce_text(2021)
        '2021'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return ""
    return str(value).strip()


def collapse_whitespace(text: str) -> str:
    """
    Collapse every run of whitespace into a single space and trim.

    Example:
        >>> collapse_whitespace("  Jan   2020 ")
        'Jan 2020'
    """
    return re.sub(r"\s+", " ", text).strip()


def dedupe_casefold(values: Iterable[str]) -> List[str]:
    """
    Remove case-insensitive duplicates, keeping the first occurrence.

    Example:
        >>> dedupe_casefold(["Python", "python", "Go", "PYTHON"])
        ['Python', 'Go']
    """
    seen = set()
    result = []
    for value in values:
        key = value.casefold()
        if key in seen:
            continue
        seen.add(key)
        result.append(value)
    return result


def clean_string_list(values: Any, limit: int = None) -> List[str]:
    """
    Trim, drop empties, dedupe (case-insensitive) and cap a list of strings.

    Accepts any value: non-list input yields an empty list and non-string
    items are coerced.

    Args:
        values: Candidate list
        limit: Maximum number of items kept (None for no cap)

    Returns:
        Cleaned list in first-seen order
    """
    if not isinstance(values, (list, tuple)):
        return []
    cleaned = dedupe_casefold(item for item in (coerce_text(v) for v in values) if item)
    return cleaned[:limit] if limit is not None else cleaned


def truncate_with_ellipsis(text: str, max_chars: int) -> str:
    """
    Truncate a line to max_chars, ending with a single "…" character.

    Example:
        >>> truncate_with_ellipsis("abcdef", 4)
        'abc…'
    """
    clean = text.strip()
    if len(clean) <= max_chars:
        return clean
    return f"{clean[: max(0, max_chars - 1)].rstrip()}…"
