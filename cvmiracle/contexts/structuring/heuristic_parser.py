"""
Heuristic résumé parser.

Glues the intake stages (normalize, extract contact, segment, parse
experience entries) into a StructuredCv without any AI involvement. The
result is always sanitized, so it satisfies every cap and dedupe rule.
"""

from typing import List, Tuple

from cvmiracle.contexts.intake.contact_extractor import ContactExtraction, ContactInfo, extract_contact
from cvmiracle.contexts.intake.experience_parser import parse_experience_entries
from cvmiracle.contexts.intake.normalizer import clean_line, split_lines
from cvmiracle.contexts.intake.segmenter import ResumeSection, lines_for, segment_lines
from cvmiracle.contexts.structuring.data_structures import ContactBlock, Experience, StructuredCv
from cvmiracle.contexts.structuring.logger import _log_debug
from cvmiracle.contexts.structuring.sanitizer import sanitize_structured_cv, split_skill_line

SUMMARY_MAX_LINES = 3
FALLBACK_SUMMARY_MIN_CHARS = 32


def _clean(lines: List[str]) -> List[str]:
    return [line for line in (clean_line(raw) for raw in lines) if line]


def _split_all(lines: List[str]) -> List[str]:
    return [chunk for line in _clean(lines) for chunk in split_skill_line(line)]


def _summary(sections: List[ResumeSection]) -> str:
    summary_lines = _clean(lines_for(sections, "Summary"))
    if summary_lines:
        return " ".join(summary_lines[:SUMMARY_MAX_LINES])

    other_lines = [
        line
        for section in sections
        if section.heading != "Experience"
        for line in _clean(section.lines)
    ]
    long_lines = [line for line in other_lines if len(line) > FALLBACK_SUMMARY_MIN_CHARS]
    return " ".join(long_lines[:SUMMARY_MAX_LINES])


def split_contact_lines(text: str) -> Tuple[List[str], ContactExtraction]:
    """
    Normalize résumé text and separate the contact header from the body.

    Returns:
        (body_lines, extraction) where body_lines excludes every line the
        contact extractor consumed
    """
    lines = split_lines(text)
    extraction = extract_contact(lines)
    body = [line for index, line in enumerate(lines) if index not in extraction.consumed]
    return body, extraction


def extract_contact_from_text(text: str) -> ContactInfo:
    """Contact details (name, email, phone, website, location) of a résumé."""
    return split_contact_lines(text)[1].contact


def parse_structured_cv_from_text(text: str) -> StructuredCv:
    """
    Build a StructuredCv from raw résumé text using heuristics only.

    Sections map as follows: Summary gives up to three lines of summary
    (falling back to long lines outside Experience); Experience is parsed
    into entries; Education and Projects give education lines; Skills and
    Languages lines are split on separators; Certifications, Projects and
    Interests give additional items.

    Args:
        text: Extracted résumé text

    Returns:
        Sanitized StructuredCv

    Example:
        >>> cv = parse_structured_cv_from_text("Skills\\nPython, Go, Rust • SQL")
        >>> cv.skills
        ['Python', 'Go', 'Rust', 'SQL']
    """
    body, extraction = split_contact_lines(text)
    sections = segment_lines(body)

    entries = parse_experience_entries(lines_for(sections, "Experience"))
    experiences = [
        Experience(
            title=entry.title,
            company=entry.company,
            date=entry.date,
            location=entry.location,
            bullets=entry.bullets,
        )
        for entry in entries
    ]

    contact = extraction.contact
    structured = StructuredCv(
        contact=ContactBlock(full_name=contact.full_name, email=contact.email, phone=contact.phone),
        summary=_summary(sections),
        experiences=experiences,
        education=_clean(lines_for(sections, "Education", "Projects")),
        skills=_split_all(lines_for(sections, "Skills")),
        languages=_split_all(lines_for(sections, "Languages")),
        additional=_split_all(lines_for(sections, "Certifications", "Projects", "Interests")),
    )
    _log_debug(
        f"Heuristic parse: {len(sections)} sections, {len(experiences)} experiences, "
        f"{len(structured.skills)} skills"
    )
    return sanitize_structured_cv(structured)
