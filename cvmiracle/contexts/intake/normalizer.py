"""
Résumé text normalizer and heading classifier for the Intake context.

Cleans extracted résumé text line by line (unicode artifacts, markdown
decoration, tabs) and decides which lines are section headings.

Two heading profiles exist because the structuring parser and the HTML
layout parser were tuned separately: the rendering profile is stricter on
heading length and looser on entry-header length.
"""

import unicodedata
from dataclasses import dataclass
from typing import List

from cvmiracle.contexts.intake.patterns import LinePatterns, match_canonical_heading

# Unicode replacements: problematic char → plain equivalent.
# Dashes and bullet glyphs are kept since they carry structure.
UNICODE_REPLACEMENTS = {
    # Spaces
    "\u00a0": " ",  # non-breaking space
    "\u202f": " ",  # narrow no-break space
    "\t": " ",
    # Zero-width characters → remove
    "\u200b": "",  # zero-width space
    "\u200c": "",  # zero-width non-joiner
    "\u200d": "",  # zero-width joiner
    "\u2060": "",  # word joiner
    "\ufeff": "",  # BOM
    # Quotes
    "\u2018": "'",  # left single quote
    "\u2019": "'",  # right single quote
    "\u201c": '"',  # left double quote
    "\u201d": '"',  # right double quote
}


@dataclass(frozen=True)
class HeadingProfile:
    """
    Length thresholds for heading and entry-header detection.

    Attributes:
        name: Profile identifier
        max_heading_chars: Longest line still considered a heading
        max_header_chars: Lines shorter than this start a new experience entry
    """

    name: str
    max_heading_chars: int
    max_header_chars: int


STRUCTURE_PROFILE = HeadingProfile(name="structure", max_heading_chars=54, max_header_chars=85)
RENDER_PROFILE = HeadingProfile(name="render", max_heading_chars=42, max_header_chars=90)


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters that cause parsing issues.

    Applies NFKC normalization and replaces invisible or typographic
    characters with plain equivalents.

    Args:
        text: Raw extracted text

    Returns:
        Normalized text

    Example:
        >>> normalize_unicode("Aujourd’hui !")
        "Aujourd'hui !"
    """
    text = unicodedata.normalize("NFKC", text)
    for char, replacement in UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text


def strip_markdown(line: str) -> str:
    """
    Remove markdown heading marks, emphasis markers and backticks.

    Example:
        >>> strip_markdown("## **Experience**")
        'Experience'
    """
    line = LinePatterns.MARKDOWN_HEADING.sub("", line.strip())
    return LinePatterns.MARKDOWN_EMPHASIS.sub("", line).strip()


def is_bullet(line: str) -> bool:
    """Check whether a line starts with a bullet glyph."""
    return bool(LinePatterns.BULLET_PREFIX.match(line.strip()))


def strip_bullet(line: str) -> str:
    """
    Remove a leading bullet glyph.

    Example:
        >>> strip_bullet("• Led Y")
        'Led Y'
    """
    return LinePatterns.BULLET_PREFIX.sub("", line.strip()).strip()


def clean_line(line: str) -> str:
    """Strip markdown decoration and any leading bullet glyph."""
    return strip_bullet(strip_markdown(line))


def split_lines(text: str) -> List[str]:
    """
    Split raw text into normalized, non-empty lines.

    Markdown decoration is removed but bullet glyphs are kept, since the
    experience parser relies on them.

    Args:
        text: Raw résumé text

    Returns:
        Trimmed non-empty lines in document order
    """
    lines = []
    for raw in normalize_unicode(text or "").splitlines():
        line = strip_markdown(raw)
        if line:
            lines.append(line)
    return lines


def _strip_heading_colon(line: str) -> str:
    clean = strip_markdown(line).strip()
    if clean.endswith(":"):
        clean = clean[:-1].strip()
    return clean


def normalize_heading(heading: str) -> str:
    """
    Map a heading to its canonical English name.

    Unknown headings pass through verbatim (trailing colon removed) so custom
    sections survive segmentation.

    Args:
        heading: Heading line as it appears in the résumé

    Returns:
        Canonical heading ("Summary", "Experience", ...) or the cleaned input

    Example:
        >>> normalize_heading("SKILLS:")
        'Skills'
        >>> normalize_heading("Compétences")
        'Skills'
        >>> normalize_heading("Volunteer Work")
        'Volunteer Work'
    """
    clean = _strip_heading_colon(normalize_unicode(heading))
    return match_canonical_heading(clean) or clean


def looks_heading(line: str, profile: HeadingProfile = STRUCTURE_PROFILE) -> bool:
    """
    Decide whether a line is a section heading.

    A line is a heading when it matches the synonym table, or when it is a
    short capitalized phrase of at most four words with no sentence
    punctuation, digits, email or entry separator.

    Args:
        line: Candidate line
        profile: Length thresholds to apply

    Returns:
        True if the line should open a new section
    """
    if is_bullet(line):
        return False

    clean = _strip_heading_colon(line)
    if not clean or len(clean) > profile.max_heading_chars:
        return False

    if match_canonical_heading(clean):
        return True

    if LinePatterns.SENTENCE_PUNCTUATION.search(clean):
        return False
    if LinePatterns.HEADING_REJECT.search(clean):
        return False
    if not LinePatterns.UPPER_START.match(clean):
        return False

    return len(clean.split()) <= 4
