"""
Contact extraction from the top of a résumé.

Scans a fixed window of leading lines for a likely full name, email, phone,
website/profile handle and location. Every field is extracted independently
from the same window and may be absent.
"""

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet, List, Optional, Tuple

from cvmiracle.contexts.intake.normalizer import strip_markdown
from cvmiracle.contexts.intake.patterns import (
    PHONE_MAX_DIGITS,
    PHONE_MIN_DIGITS,
    ContactPatterns,
    DatePatterns,
    match_canonical_heading,
)
from cvmiracle.utils.config import load_word_list

CONTACT_WINDOW = 12
NAME_MAX_CHARS = 42
# Location lines longer than this stay in the body (e.g. a summary sentence)
LOCATION_LINE_MAX_CHARS = 48


@dataclass(frozen=True)
class ContactInfo:
    """Contact fields found in the résumé header (empty string when absent)."""

    full_name: str = ""
    email: str = ""
    phone: str = ""
    website: str = ""
    location: str = ""


@dataclass(frozen=True)
class ContactExtraction:
    """
    Result of scanning the header window.

    Attributes:
        contact: Extracted fields
        consumed: Indices (within the scanned lines) holding contact data
    """

    contact: ContactInfo = field(default_factory=ContactInfo)
    consumed: FrozenSet[int] = frozenset()


@lru_cache(maxsize=8)
def _location_pattern(locations: Tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(location) for location in locations)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


def location_pattern() -> re.Pattern:
    """Compiled gazetteer of locations from gazetteers.yaml."""
    return _location_pattern(load_word_list("gazetteers", "locations"))


def is_likely_name(line: str) -> bool:
    """
    Check whether a line looks like a person's full name.

    Two to four capitalized words, no digits or "@", at most 42 characters,
    and not a known section heading.

    Example:
        >>> is_likely_name("John Doe")
        True
        >>> is_likely_name("Professional Summary")
        False
    """
    clean = strip_markdown(line)
    if not clean or len(clean) > NAME_MAX_CHARS:
        return False
    if re.search(r"[@\d]", clean):
        return False
    if match_canonical_heading(clean):
        return False
    words = clean.split()
    if len(words) < 2 or len(words) > 4:
        return False
    return all(ContactPatterns.NAME_WORD.fullmatch(word) for word in words)


def find_phone(line: str) -> Optional[str]:
    """
    Return the first phone-like digit group with 8 to 15 digits.

    Year ranges ("2019-2021") are never treated as phone numbers.

    Example:
        >>> find_phone("Tel: +33 6 12 34 56 78")
        '+33 6 12 34 56 78'
    """
    for match in ContactPatterns.PHONE.finditer(line):
        candidate = match.group(0).strip()
        digits = re.sub(r"\D", "", candidate)
        if not PHONE_MIN_DIGITS <= len(digits) <= PHONE_MAX_DIGITS:
            continue
        if DatePatterns.YEAR_RANGE.fullmatch(candidate):
            continue
        return candidate
    return None


def find_website(line: str) -> Optional[str]:
    """Return the first profile URL or personal domain, without protocol."""
    match = ContactPatterns.WEBSITE.search(line)
    if not match:
        return None
    return ContactPatterns.PROTOCOL.sub("", match.group(0))


def extract_contact(lines: List[str], window: int = CONTACT_WINDOW) -> ContactExtraction:
    """
    Extract contact details from the first lines of a résumé.

    The first match of each field in document order wins. A line is marked
    consumed when it provides an email, phone or website, when it is a short
    location line, or when it is the leading full-name line.

    Args:
        lines: Normalized résumé lines
        window: Number of leading lines to scan

    Returns:
        ContactExtraction with fields and consumed line indices

    Example:
        >>> result = extract_contact(["John Doe", "john@doe.com", "+33 6 12 34 56 78"])
        >>> result.contact.email, result.contact.phone
        ('john@doe.com', '+33 6 12 34 56 78')
        >>> sorted(result.consumed)
        [0, 1, 2]
    """
    head = lines[:window]
    fields = {"full_name": "", "email": "", "phone": "", "website": "", "location": ""}
    consumed = set()

    if head and is_likely_name(head[0]):
        fields["full_name"] = strip_markdown(head[0])
        consumed.add(0)

    locations = location_pattern()

    for index, raw in enumerate(head):
        line = strip_markdown(raw)

        if not fields["email"]:
            email = ContactPatterns.EMAIL.search(line)
            if email:
                fields["email"] = email.group(0)
                consumed.add(index)

        if not fields["phone"]:
            phone = find_phone(line)
            if phone:
                fields["phone"] = phone
                consumed.add(index)

        if not fields["website"]:
            website = find_website(line)
            if website:
                fields["website"] = website
                consumed.add(index)

        if not fields["location"]:
            location = locations.search(line)
            if location:
                if len(line) <= LOCATION_LINE_MAX_CHARS and index in consumed:
                    fields["location"] = location.group(0)
                elif len(line) <= LOCATION_LINE_MAX_CHARS:
                    fields["location"] = line
                    consumed.add(index)
                else:
                    fields["location"] = location.group(0)

    return ContactExtraction(contact=ContactInfo(**fields), consumed=frozenset(consumed))
