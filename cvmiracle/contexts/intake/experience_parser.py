"""
Experience entry parsing.

Turns the lines of an Experience section into discrete job entries
(title, company, location, date range, bullet achievements). Lines are tagged
by the ordered classifier in line_classifier; this module only reacts to the
tags. When the section yields no entry at all, a keyword/date scan recovers
what it can.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional, Tuple

from cvmiracle.contexts.intake.line_classifier import (
    ClassifierState,
    LineKind,
    classify_line,
    has_date,
    strip_date,
)
from cvmiracle.contexts.intake.logger import log_experience_result
from cvmiracle.contexts.intake.normalizer import STRUCTURE_PROFILE, HeadingProfile, clean_line
from cvmiracle.contexts.intake.patterns import DatePatterns, LinePatterns
from cvmiracle.utils.config import load_word_list

MAX_BULLETS = 4


@dataclass
class ExperienceEntry:
    """One job entry as read from free text."""

    title: str
    company: str = ""
    location: str = ""
    date: str = ""
    bullets: List[str] = field(default_factory=list)


def split_segments(text: str) -> List[str]:
    """
    Split an entry header into its separator-delimited parts.

    Recognized separators are " — ", " – ", " | " and " - ". When none is
    present, " at " / " @ " / " chez " split a role from its company.

    Example:
        >>> split_segments("Senior Engineer — Acme Corp — Paris")
        ['Senior Engineer', 'Acme Corp', 'Paris']
        >>> split_segments("Data Analyst chez Qonto")
        ['Data Analyst', 'Qonto']
    """
    parts = [LinePatterns.EDGE_DECORATION.sub("", part) for part in LinePatterns.ENTRY_SEPARATOR.split(text)]
    parts = [part for part in parts if part]
    if len(parts) == 1:
        at_parts = [part.strip() for part in LinePatterns.INLINE_AT.split(parts[0], maxsplit=1)]
        if len(at_parts) == 2 and all(at_parts):
            return at_parts
    return parts


def is_date_like(text: str) -> bool:
    """Check whether text holds nothing but date material."""
    clean = text.strip()
    if not clean:
        return False
    return bool(
        DatePatterns.DATE_LIKE.fullmatch(clean)
        or DatePatterns.DATE_RANGE.fullmatch(clean)
        or DatePatterns.PRESENT.fullmatch(clean)
    )


def parse_entry_header(line: str) -> ExperienceEntry:
    """
    Parse a header line into title, company, location and date.

    The date token is removed first, then the remainder is split on
    separators into [title, company, location...]. A single part becomes the
    title with an empty company.

    Example:
        >>> parse_entry_header("Senior Engineer — Acme Corp | 2020 - Present")
        ExperienceEntry(title='Senior Engineer', company='Acme Corp', location='', date='2020 - Present', bullets=[])
    """
    date, remainder = strip_date(clean_line(line))
    parts = split_segments(remainder)
    return ExperienceEntry(
        title=parts[0] if parts else "",
        company=parts[1] if len(parts) > 1 else "",
        location=", ".join(parts[2:]),
        date=date,
    )


def _has_valid_title(entry: ExperienceEntry) -> bool:
    return len(entry.title) > 1 and not is_date_like(entry.title)


def _append_bullet(entry: ExperienceEntry, line: str) -> None:
    text = clean_line(line)
    if not text or text in (entry.title, entry.company) or is_date_like(text):
        return
    entry.bullets.append(text)


def _finalize(entries: List[ExperienceEntry]) -> List[ExperienceEntry]:
    kept = [entry for entry in entries if _has_valid_title(entry)]
    for entry in kept:
        entry.bullets = entry.bullets[:MAX_BULLETS]
    return kept


@lru_cache(maxsize=8)
def _role_pattern(keywords: Tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(keyword) for keyword in keywords)
    return re.compile(rf"\b(?:{alternatives})s?\b", re.IGNORECASE)


def role_keyword_pattern() -> re.Pattern:
    """Compiled role keywords from gazetteers.yaml (manager, engineer, ...)."""
    return _role_pattern(load_word_list("gazetteers", "role_keywords"))


def _parse_with_classifier(lines: List[str], profile: HeadingProfile) -> List[ExperienceEntry]:
    entries: List[ExperienceEntry] = []
    current: Optional[ExperienceEntry] = None
    after_header = False
    pending_date = ""

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        state = ClassifierState(
            after_header=after_header,
            entry_has_company=bool(current and current.company),
            entry_has_location=bool(current and current.location),
            profile=profile,
        )
        kind = classify_line(line, state)

        if kind in (LineKind.DATE_HEADER, LineKind.HEADER):
            if current is not None:
                entries.append(current)
            current = parse_entry_header(line)
            if not current.date and pending_date:
                current.date = pending_date
            pending_date = ""
            after_header = True
            continue

        if kind is LineKind.DATE_ONLY:
            date, _ = strip_date(clean_line(line))
            if current is not None and after_header and not current.date:
                current.date = date
            else:
                pending_date = date
            continue

        if kind is LineKind.COMPANY_LINE:
            parts = split_segments(clean_line(line))
            current.company = parts[0]
            if len(parts) > 1 and not current.location:
                current.location = ", ".join(parts[1:])
            continue

        if kind is LineKind.LOCATION_LINE:
            current.location = clean_line(line)
            continue

        # BULLET or PLAIN: achievement text; lines before any header are dropped
        after_header = False
        if current is not None:
            _append_bullet(current, line)

    if current is not None:
        entries.append(current)

    return _finalize(entries)


def _parse_fallback(lines: List[str]) -> List[ExperienceEntry]:
    """Rebuild entries from lines that carry a date or a role keyword."""
    roles = role_keyword_pattern()
    entries: List[ExperienceEntry] = []
    current: Optional[ExperienceEntry] = None

    for raw in lines:
        text = clean_line(raw)
        if not text:
            continue

        if has_date(text) or roles.search(text):
            parsed = parse_entry_header(text)
            if not parsed.title:
                if current is not None and not current.date:
                    current.date = parsed.date
                continue
            if current is not None:
                entries.append(current)
            current = parsed
            continue

        if current is not None:
            _append_bullet(current, text)

    if current is not None:
        entries.append(current)

    return _finalize(entries)


def parse_experience_entries(
    lines: List[str],
    profile: HeadingProfile = STRUCTURE_PROFILE,
) -> List[ExperienceEntry]:
    """
    Segment Experience section lines into job entries.

    Args:
        lines: Raw lines of the Experience section (bullet glyphs kept)
        profile: Header length thresholds

    Returns:
        Entries in document order, each with at most four bullets. Entries
        with an empty or date-like title are discarded.

    Example:
        >>> entries = parse_experience_entries([
        ...     "Senior Engineer — Acme Corp", "2020 - Present", "- Shipped X", "- Led Y",
        ... ])
        >>> entries[0].title, entries[0].company, entries[0].date, entries[0].bullets
        ('Senior Engineer', 'Acme Corp', '2020 - Present', ['Shipped X', 'Led Y'])
    """
    entries = _parse_with_classifier(lines, profile)
    used_fallback = False
    if not entries and lines:
        entries = _parse_fallback(lines)
        used_fallback = True
    log_experience_result(entries, used_fallback)
    return entries
