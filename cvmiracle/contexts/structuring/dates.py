"""
Date handling for experience entries.

All free-text date ranges are split here (split_date_range) so the heuristic
parser, the hybrid mapping and the overlap analyzer agree on what "start",
"end" and "current" mean.

Dates compare as year*100+month. Present/current markers compare as +inf and
unparseable values as -inf.
"""

import math
from typing import Any, List, Sequence, Tuple

from cvmiracle.contexts.intake.patterns import MONTH_NUMBERS, DatePatterns
from cvmiracle.contexts.structuring.data_structures import HybridExperience
from cvmiracle.utils.text_processing import collapse_whitespace

DEFAULT_TITLE_LABEL = "Poste"
DEFAULT_COMPANY_LABEL = "Entreprise"
OVERLAP_JOINER = " ↔ "


def _month_from_name(token: str) -> int:
    match = DatePatterns.MONTH_NAME.search(token)
    if not match:
        return 0
    name = match.group(0).lower().rstrip(".")
    return MONTH_NUMBERS.get(name[:4]) or MONTH_NUMBERS.get(name[:3], 0)


def parse_date_token(value: str) -> float:
    """
    Convert a single date token into a sortable number.

    Args:
        value: Free-text date such as "2020", "03/2021", "Jan 2019" or "Present"

    Returns:
        year*100+month (month defaults to 1), +inf for present markers,
        -inf when no 4-digit year is found

    Example:
        >>> parse_date_token("03/2021")
        202103
        >>> parse_date_token("aujourd'hui")
        inf
    """
    clean = (value or "").strip().lower()
    if not clean:
        return -math.inf
    if DatePatterns.PRESENT.search(clean):
        return math.inf

    year = DatePatterns.YEAR.search(clean)
    if not year:
        return -math.inf

    month = _month_from_name(clean)
    if not month:
        numeric = DatePatterns.NUMERIC_MONTH.search(clean)
        month = int(numeric.group(1)) if numeric else 1
    return int(year.group(0)) * 100 + month


def split_date_range(date: str) -> Tuple[str, str, bool]:
    """
    Split a free-text date range into (start, end, is_current).

    The end keeps its original wording ("Present" stays "Present");
    is_current is set whenever a present marker appears anywhere.

    Example:
        >>> split_date_range("2020 - Present")
        ('2020', 'Present', True)
        >>> split_date_range("Jan 2019–Mar 2021")
        ('Jan 2019', 'Mar 2021', False)
        >>> split_date_range("2018")
        ('2018', '', False)
    """
    clean = collapse_whitespace(date or "")
    if not clean:
        return "", "", False

    parts = DatePatterns.RANGE_SEPARATOR.split(clean, maxsplit=1)
    start = parts[0].strip()
    end = parts[1].strip() if len(parts) > 1 else ""
    return start, end, bool(DatePatterns.PRESENT.search(clean))


def _as_hybrid(item: Any) -> HybridExperience:
    if isinstance(item, HybridExperience):
        return item
    start, end, is_current = split_date_range(getattr(item, "date", ""))
    return HybridExperience(
        job_title=getattr(item, "title", ""),
        company=getattr(item, "company", ""),
        location=getattr(item, "location", ""),
        start_date=start,
        end_date=end,
        is_current=is_current,
    )


def effective_end(item: Any) -> float:
    """Sort key for an experience: +inf when current, else end (or start) date."""
    hybrid = _as_hybrid(item)
    if hybrid.is_current:
        return math.inf
    return parse_date_token(hybrid.end_date or hybrid.start_date)


def sort_experiences_most_recent(experiences: Sequence[Any]) -> list:
    """
    Order experiences most recent first.

    Accepts HybridExperience or Experience items. The sort is stable: entries
    with equal effective end dates keep their input order, and undated
    entries go last.

    Args:
        experiences: Experience entries of either shape

    Returns:
        New list, same item objects
    """
    return sorted(experiences, key=effective_end, reverse=True)


def detect_date_overlaps(experiences: Sequence[Any]) -> List[str]:
    """
    Find every pair of experiences whose date ranges intersect.

    Entries whose start or end cannot be parsed are ignored. Ongoing entries
    (end = +inf) take part. Each overlapping pair yields one warning,
    in input order.

    Args:
        experiences: HybridExperience or Experience items

    Returns:
        Warnings such as "Engineer @ Acme ↔ Lead @ Beta"

    Example:
        >>> from cvmiracle.contexts.structuring.data_structures import Experience
        >>> detect_date_overlaps([
        ...     Experience("Engineer", "Acme", "2019-2021"),
        ...     Experience("Lead", "Beta", "2020-2022"),
        ... ])
        ['Engineer @ Acme ↔ Lead @ Beta']
    """
    spans = []
    for item in experiences:
        hybrid = _as_hybrid(item)
        start = parse_date_token(hybrid.start_date)
        end = effective_end(hybrid)
        if start == -math.inf or end == -math.inf:
            continue
        label = f"{hybrid.job_title or DEFAULT_TITLE_LABEL} @ {hybrid.company or DEFAULT_COMPANY_LABEL}"
        spans.append((label, start, end))

    overlaps = []
    for index, (left_label, left_start, left_end) in enumerate(spans):
        for right_label, right_start, right_end in spans[index + 1 :]:
            if left_start <= right_end and right_start <= left_end:
                overlaps.append(f"{left_label}{OVERLAP_JOINER}{right_label}")
    return overlaps
