"""
Reusable patterns and constants for résumé text parsing.

This module provides the heading synonym table and the regex patterns used
across the intake context for line classification, entry parsing and
contact extraction.

Pattern classes follow a common convention:
- Dataclasses with frozen=True for immutability
- Class-level constants for patterns
- Helper functions that use these patterns
"""

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

# =============================================================================
# CANONICAL HEADINGS
# =============================================================================

CANONICAL_HEADINGS = (
    "Summary",
    "Experience",
    "Education",
    "Skills",
    "Projects",
    "Languages",
    "Certifications",
    "Interests",
)

# English/French variants, compared case-insensitively after trailing colon removal
HEADING_SYNONYMS: Dict[str, Tuple[str, ...]] = {
    "Summary": (
        "summary",
        "professional summary",
        "executive summary",
        "profile",
        "professional profile",
        "profil",
        "profil professionnel",
        "résumé",
        "resume",
        "about",
        "about me",
        "à propos",
        "a propos",
        "objective",
    ),
    "Experience": (
        "experience",
        "experiences",
        "work experience",
        "professional experience",
        "employment",
        "employment history",
        "work history",
        "career",
        "expérience",
        "expériences",
        "expérience professionnelle",
        "expériences professionnelles",
        "experience professionnelle",
        "parcours professionnel",
    ),
    "Education": (
        "education",
        "academic background",
        "formation",
        "formations",
        "études",
        "etudes",
        "diplômes",
        "diplomes",
    ),
    "Skills": (
        "skills",
        "technical skills",
        "core skills",
        "key skills",
        "compétences",
        "competences",
        "compétences techniques",
        "competences techniques",
    ),
    "Projects": (
        "project",
        "projects",
        "personal projects",
        "projet",
        "projets",
    ),
    "Languages": (
        "language",
        "languages",
        "langue",
        "langues",
    ),
    "Certifications": (
        "certification",
        "certifications",
        "certificate",
        "certificates",
        "certificat",
        "certificats",
        "license",
        "licenses",
    ),
    "Interests": (
        "interest",
        "interests",
        "hobbies",
        "centres d'intérêt",
        "centres d'interet",
        "centre d'intérêt",
        "loisirs",
    ),
}

_SYNONYM_LOOKUP = {
    variant.casefold(): canonical
    for canonical, variants in HEADING_SYNONYMS.items()
    for variant in variants
}


def match_canonical_heading(text: str) -> Optional[str]:
    """
    Look up the canonical heading for a cleaned heading candidate.

    Args:
        text: Heading text with markdown and trailing colon already removed

    Returns:
        Canonical heading name, or None when text is not a known variant

    Example:
        >>> match_canonical_heading("Compétences")
        'Skills'
        >>> match_canonical_heading("Side Quests") is None
        True
    """
    return _SYNONYM_LOOKUP.get(" ".join(text.split()).casefold())


# =============================================================================
# LINE PATTERNS
# =============================================================================


@dataclass(frozen=True)
class LinePatterns:
    """
    Regex patterns for line-level decoration and classification.
    """

    # Leading bullet glyph; "*" only counts when followed by whitespace
    BULLET_PREFIX: re.Pattern = re.compile(r"^(?:[-•▪◦·‣]|\*(?=\s))\s*")

    # Markdown decoration
    MARKDOWN_HEADING: re.Pattern = re.compile(r"^#{1,6}\s*")
    MARKDOWN_EMPHASIS: re.Pattern = re.compile(r"\*\*|__|`")

    # Sentence punctuation disqualifies a heading
    SENTENCE_PUNCTUATION: re.Pattern = re.compile(r"[.,;!?]")

    # Content that never appears in a heading: digits, emails, entry separators
    HEADING_REJECT: re.Pattern = re.compile(r"\d|@|\s[|—–-]\s")

    UPPER_START: re.Pattern = re.compile(r"^[A-ZÀÂÄÇÉÈÊËÎÏÔÖÙÛÜŸ]")

    # Separator between title, company and location
    ENTRY_SEPARATOR: re.Pattern = re.compile(r"\s+[|—–]\s+|\s+-\s+")

    # Weaker separators, only used when no entry separator is present
    INLINE_AT: re.Pattern = re.compile(r"\s+(?:@|at|chez)\s+", re.IGNORECASE)

    # Decoration left at the edges once a date is removed from a header
    EDGE_DECORATION: re.Pattern = re.compile(r"^[\s|·•,:;()\[\]–—-]+|[\s|·•,:;()\[\]–—-]+$")


# =============================================================================
# DATE PATTERNS
# =============================================================================

_MONTH_NAME = (
    r"(?:jan(?:uary|vier)?|feb(?:ruary)?|f[ée]v(?:rier)?|mar(?:ch|s)?|apr(?:il)?|avr(?:il)?"
    r"|may|mai|june?|juin|july?|juil(?:let)?|aug(?:ust)?|ao[uû]t|sep(?:t(?:ember|embre)?)?"
    r"|oct(?:ober|obre)?|nov(?:ember|embre)?|dec(?:ember)?|d[ée]c(?:embre)?)\.?"
)
_MONTH_PREFIX = rf"(?:{_MONTH_NAME}\s+|\d{{1,2}}\s*[/.]\s*)?"
_YEAR = r"(?:19|20)\d{2}"
_PRESENT = r"(?:present|current|now|aujourd'hui)"

# Keyed by lowercase 4-letter or 3-letter prefix
MONTH_NUMBERS = {
    "jan": 1,
    "feb": 2,
    "fev": 2,
    "fév": 2,
    "mar": 3,
    "apr": 4,
    "avr": 4,
    "may": 5,
    "mai": 5,
    "jun": 6,
    "juin": 6,
    "juil": 7,
    "jul": 7,
    "aug": 8,
    "aou": 8,
    "aoû": 8,
    "sep": 9,
    "oct": 10,
    "nov": 11,
    "dec": 12,
    "déc": 12,
}


@dataclass(frozen=True)
class DatePatterns:
    """
    Regex patterns for date tokens in experience headers and date fields.

    Supports:
    - Bare years and year ranges ("2019-2021", "2020 - Present")
    - Month-name prefixes ("Jan 2020 - Mar 2021", "sept. 2019 – aujourd'hui")
    - Numeric months ("01/2020 - 03/2022")
    """

    DATE_RANGE: re.Pattern = re.compile(
        rf"\b{_MONTH_PREFIX}{_YEAR}(?:\s*[-–—]\s*(?:{_MONTH_PREFIX}{_YEAR}|{_PRESENT}))?\b",
        re.IGNORECASE,
    )

    YEAR: re.Pattern = re.compile(_YEAR)

    YEAR_RANGE: re.Pattern = re.compile(rf"{_YEAR}\s*[-–—]\s*{_YEAR}")

    PRESENT: re.Pattern = re.compile(rf"\b{_PRESENT}\b", re.IGNORECASE)

    # Numeric month adjacent to a separator ("03/2021", "3 2021")
    NUMERIC_MONTH: re.Pattern = re.compile(r"(?:^|\s)(0?[1-9]|1[0-2])(?:[/.-]|\s|$)")

    MONTH_NAME: re.Pattern = re.compile(rf"\b{_MONTH_NAME}", re.IGNORECASE)

    # Range separator; spaced dashes first, bare dash only right after a year
    RANGE_SEPARATOR: re.Pattern = re.compile(r"\s+[-–—]\s+|\s*[–—]\s*|(?<=\d{4})\s*-\s*")

    # A title made only of date material
    DATE_LIKE: re.Pattern = re.compile(r"[\d\s/.,()\[\]–—-]+")


# =============================================================================
# CONTACT PATTERNS
# =============================================================================


@dataclass(frozen=True)
class ContactPatterns:
    """
    Regex patterns for contact details in the résumé header.
    """

    # Anchored to the start of a run so long unbroken lines scan in linear time
    EMAIL: re.Pattern = re.compile(r"(?<![A-Z0-9._%+-])[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)

    # Loose international digit groups; candidates are checked for 8-15 digits
    PHONE: re.Pattern = re.compile(r"(?:\+\d{1,3}[\s.-]?)?(?:\(?\d{1,4}\)?[\s.-]?){2,6}\d{2,4}")

    # Profile URLs and personal domains, never the domain part of an email
    WEBSITE: re.Pattern = re.compile(
        r"(?<![@\w.-])(?:https?://)?(?:www\.)?"
        r"(?:linkedin\.com/[\w\-/%]+|github\.com/[\w\-]+|[\w-]+\.(?:dev|io|com|fr))\b",
        re.IGNORECASE,
    )

    PROTOCOL: re.Pattern = re.compile(r"^https?://", re.IGNORECASE)

    # One capitalized name word ("Jean-Luc", "O'Neil")
    NAME_WORD: re.Pattern = re.compile(r"[A-ZÀÂÄÇÉÈÊËÎÏÔÖÙÛÜŸ][a-zàâäçéèêëîïôöùûüÿ'-]+")


PHONE_MIN_DIGITS = 8
PHONE_MAX_DIGITS = 15
