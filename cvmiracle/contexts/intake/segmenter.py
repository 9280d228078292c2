"""
Section segmentation for résumé text.

Splits normalized lines into named sections. Content before the first
recognized heading lands in an implicit "Summary" section so nothing is lost.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from cvmiracle.contexts.intake.logger import log_segmentation_result
from cvmiracle.contexts.intake.normalizer import (
    STRUCTURE_PROFILE,
    HeadingProfile,
    looks_heading,
    normalize_heading,
    split_lines,
)

DEFAULT_SECTION = "Summary"


@dataclass
class ResumeSection:
    """A heading and the raw lines beneath it (bullet glyphs kept)."""

    heading: str
    lines: List[str] = field(default_factory=list)


def segment_lines(
    lines: Iterable[str],
    profile: HeadingProfile = STRUCTURE_PROFILE,
) -> List[ResumeSection]:
    """
    Group lines into sections using the heading classifier.

    Args:
        lines: Normalized lines (see split_lines)
        profile: Heading thresholds to apply

    Returns:
        Non-empty sections in document order. Headings are canonicalized;
        a heading repeated in the text yields two sections.
    """
    sections: List[ResumeSection] = []
    current = ResumeSection(heading=DEFAULT_SECTION)

    for line in lines:
        if looks_heading(line, profile):
            if current.lines:
                sections.append(current)
            current = ResumeSection(heading=normalize_heading(line))
            continue
        current.lines.append(line)

    if current.lines:
        sections.append(current)

    log_segmentation_result(sections)
    return sections


def parse_sections(text: str, profile: HeadingProfile = STRUCTURE_PROFILE) -> List[ResumeSection]:
    """
    Segment raw résumé text into sections.

    Example:
        >>> [s.heading for s in parse_sections("Intro line\\nSkills\\nPython, Go")]
        ['Summary', 'Skills']
    """
    return segment_lines(split_lines(text), profile)


def lines_for(sections: Iterable[ResumeSection], *headings: str) -> List[str]:
    """Concatenate the lines of every section whose heading is in headings."""
    return [line for section in sections if section.heading in headings for line in section.lines]
