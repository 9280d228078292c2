"""
Line classification for experience sections.

Each line of an Experience section is tagged with a LineKind by an ordered
list of predicates. The first predicate that accepts the line wins, so the
order below is the precedence of the heuristics.
"""

import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Callable, List, Optional, Tuple

from cvmiracle.contexts.intake.contact_extractor import LOCATION_LINE_MAX_CHARS, location_pattern
from cvmiracle.contexts.intake.normalizer import STRUCTURE_PROFILE, HeadingProfile, is_bullet
from cvmiracle.contexts.intake.patterns import DatePatterns, LinePatterns
from cvmiracle.utils.config import load_word_list

COMPANY_LINE_MAX_CHARS = 90
SHORT_COMPANY_MAX_WORDS = 5
SHORT_COMPANY_MAX_CHARS = 40


class LineKind(str, Enum):
    """Tag assigned to a line of an Experience section."""

    BULLET = "bullet"
    DATE_ONLY = "date_only"
    COMPANY_LINE = "company_line"
    LOCATION_LINE = "location_line"
    DATE_HEADER = "date_header"
    HEADER = "header"
    PLAIN = "plain"


@dataclass(frozen=True)
class ClassifierState:
    """
    Parser state visible to the predicates.

    Attributes:
        after_header: Previous consumed line opened (or completed) an entry header
        entry_has_company: Current entry already has a company
        entry_has_location: Current entry already has a location
        profile: Length thresholds in use
    """

    after_header: bool = False
    entry_has_company: bool = True
    entry_has_location: bool = True
    profile: HeadingProfile = STRUCTURE_PROFILE


@lru_cache(maxsize=8)
def _company_suffix_pattern(suffixes: Tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(suffix) for suffix in suffixes)
    return re.compile(rf"\b(?:{alternatives})\.?(?=\s|,|$)")


def company_suffix_pattern() -> re.Pattern:
    """Compiled pattern for legal-entity suffixes listed in gazetteers.yaml."""
    return _company_suffix_pattern(load_word_list("gazetteers", "company_suffixes"))


def strip_date(line: str) -> Tuple[str, str]:
    """
    Remove the first date token from a line.

    Returns:
        (date, remainder) where remainder has edge separators stripped

    Example:
        >>> strip_date("Senior Engineer | Acme | 2020 - Present")
        ('2020 - Present', 'Senior Engineer | Acme')
    """
    match = DatePatterns.DATE_RANGE.search(line)
    if not match:
        return "", line.strip()
    remainder = f"{line[: match.start()]} {line[match.end():]}"
    remainder = re.sub(r"\(\s*\)|\[\s*\]", " ", remainder)
    remainder = LinePatterns.EDGE_DECORATION.sub("", " ".join(remainder.split()))
    return match.group(0).strip(), remainder


def has_date(line: str) -> bool:
    return bool(DatePatterns.DATE_RANGE.search(line))


def has_separator(line: str) -> bool:
    return bool(LinePatterns.ENTRY_SEPARATOR.search(line))


def looks_like_company(line: str) -> bool:
    """
    Check whether a standalone line reads like a company name.

    Requires no digits and at most 90 characters, plus one of: a
    dash-separated pattern ("Acme - Paris"), a legal suffix ("Acme Inc"),
    or a short line.
    """
    clean = line.strip()
    if not clean or len(clean) > COMPANY_LINE_MAX_CHARS:
        return False
    if re.search(r"\d", clean):
        return False
    has_suffix = bool(company_suffix_pattern().search(clean))
    if LinePatterns.SENTENCE_PUNCTUATION.search(clean) and not has_suffix:
        return False
    if has_separator(clean) or has_suffix:
        return True
    return len(clean) <= SHORT_COMPANY_MAX_CHARS and len(clean.split()) <= SHORT_COMPANY_MAX_WORDS


def _is_bullet(line: str, state: ClassifierState) -> bool:
    return is_bullet(line)


def _is_date_only(line: str, state: ClassifierState) -> bool:
    date, remainder = strip_date(line)
    return bool(date) and not remainder


def _is_company_line(line: str, state: ClassifierState) -> bool:
    return state.after_header and not state.entry_has_company and looks_like_company(line)


def looks_like_location(line: str) -> bool:
    """
    Check whether a standalone line is a place ("Paris, France", "Remote").

    The line must mention a gazetteer location and either contain nothing
    else or follow the "City, Country" comma pattern.
    """
    clean = line.strip()
    if not clean or len(clean) > LOCATION_LINE_MAX_CHARS or re.search(r"\d", clean):
        return False
    pattern = location_pattern()
    if not pattern.search(clean):
        return False
    remainder = re.sub(r"[\s,/|()–—-]+", "", pattern.sub("", clean))
    return not remainder or "," in clean


def _is_location_line(line: str, state: ClassifierState) -> bool:
    return state.after_header and not state.entry_has_location and looks_like_location(line)


def _is_date_header(line: str, state: ClassifierState) -> bool:
    return has_date(line)


def _is_header(line: str, state: ClassifierState) -> bool:
    return has_separator(line) or len(line.strip()) < state.profile.max_header_chars


# Evaluated in order; first match wins
CLASSIFIERS: List[Tuple[LineKind, Callable[[str, ClassifierState], bool]]] = [
    (LineKind.BULLET, _is_bullet),
    (LineKind.DATE_ONLY, _is_date_only),
    (LineKind.LOCATION_LINE, _is_location_line),
    (LineKind.COMPANY_LINE, _is_company_line),
    (LineKind.DATE_HEADER, _is_date_header),
    (LineKind.HEADER, _is_header),
]


def classify_line(line: str, state: Optional[ClassifierState] = None) -> LineKind:
    """
    Tag a line of an Experience section.

    Args:
        line: Raw section line (bullet glyph kept)
        state: Parser state; defaults to "not directly after a header"

    Returns:
        The LineKind of the first predicate that accepts the line, else PLAIN

    Example:
        >>> classify_line("- Shipped X")
        <LineKind.BULLET: 'bullet'>
        >>> classify_line("Senior Engineer — Acme Corp")
        <LineKind.HEADER: 'header'>
    """
    state = state or ClassifierState()
    for kind, predicate in CLASSIFIERS:
        if predicate(line, state):
            return kind
    return LineKind.PLAIN
