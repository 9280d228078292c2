"""
Section placement: sidebar membership and original ordering.

When a résumé is rewritten, its sections are laid out in the order the
original used, and sections that were short lists in the original go to the
sidebar of two-column variants.
"""

from typing import Dict, List, Sequence, Set

from cvmiracle.contexts.intake.normalizer import normalize_heading
from cvmiracle.contexts.intake.segmenter import ResumeSection
from cvmiracle.utils.config import load_word_list

SIDEBAR_MAX_LINES = 6
SIDEBAR_MAX_AVERAGE_CHARS = 40


def default_sidebar_headings() -> Set[str]:
    return set(load_word_list("gazetteers", "sidebar_headings"))


def classify_sidebar_headings(original_sections: Sequence[ResumeSection]) -> Set[str]:
    """
    Headings that belong in the sidebar, judged from the original résumé.

    A section qualifies when its heading is a known sidebar heading (Skills,
    Languages, Certifications, Interests) or when it has at most six lines
    averaging under 40 characters.

    Args:
        original_sections: Sections parsed from the original text

    Returns:
        Canonical headings
    """
    known = default_sidebar_headings()
    sidebar = set()
    for section in original_sections:
        heading = normalize_heading(section.heading)
        lines = section.lines
        average = sum(len(line) for line in lines) / len(lines) if lines else 0
        if heading in known or (len(lines) <= SIDEBAR_MAX_LINES and average < SIDEBAR_MAX_AVERAGE_CHARS):
            sidebar.add(heading)
    return sidebar


def rebuild_sections_by_original_order(
    original_sections: Sequence[ResumeSection],
    optimized_sections: Sequence[ResumeSection],
    metadata_order: Sequence[str] = (),
) -> List[ResumeSection]:
    """
    Reorder rewritten sections to follow the original résumé.

    The skeleton is the detected section order when available, else the
    headings of the original sections. Rewritten sections matching the
    skeleton come first, in skeleton order; the rest follow in their own
    order. Only the first rewritten section per canonical heading is kept.

    Example:
        >>> original = [ResumeSection("Skills", ["Go"]), ResumeSection("Experience", ["x"])]
        >>> optimized = [ResumeSection("Experience", ["y"]), ResumeSection("Skills", ["Go"])]
        >>> [s.heading for s in rebuild_sections_by_original_order(original, optimized)]
        ['Skills', 'Experience']
    """
    by_heading: Dict[str, ResumeSection] = {}
    for section in optimized_sections:
        heading = normalize_heading(section.heading)
        if heading not in by_heading:
            by_heading[heading] = ResumeSection(heading=heading, lines=list(section.lines))

    if metadata_order:
        skeleton = [normalize_heading(heading) for heading in metadata_order]
    else:
        skeleton = [normalize_heading(section.heading) for section in original_sections]

    rebuilt = []
    used = set()
    for heading in skeleton:
        section = by_heading.get(heading)
        if not section or not section.lines or heading in used:
            continue
        rebuilt.append(section)
        used.add(heading)

    rebuilt.extend(section for heading, section in by_heading.items() if heading not in used)
    return rebuilt
