"""
Conversions between StructuredCv and HybridCvForm.

The two directions form a near-isomorphism: experience content and
most-recent-first order survive a round trip, while the free-text date is
re-synthesized from start/end and may not match byte for byte.
"""

from typing import Any

from cvmiracle.contexts.intake.experience_parser import split_segments
from cvmiracle.contexts.intake.line_classifier import strip_date
from cvmiracle.contexts.structuring.data_structures import (
    ContactBlock,
    Experience,
    HybridCvForm,
    HybridEducation,
    HybridExperience,
    HybridLanguage,
    HybridPersonalInfo,
    StructuredCv,
)
from cvmiracle.contexts.structuring.dates import sort_experiences_most_recent, split_date_range
from cvmiracle.contexts.structuring.sanitizer import (
    MAX_BULLETS,
    sanitize_hybrid_cv_form,
    sanitize_structured_cv,
)
from cvmiracle.utils.text_processing import dedupe_casefold

FIELD_JOINER = " — "
PRESENT_LABEL = "Present"


def create_empty_hybrid_cv_form() -> HybridCvForm:
    """Blank form with one empty experience row for the editor to fill in."""
    return HybridCvForm(experience=[HybridExperience()])


# =============================================================================
# STRUCTURED -> HYBRID
# =============================================================================


def _education_from_line(line: str) -> HybridEducation:
    date, remainder = strip_date(line)
    start, end, _ = split_date_range(date)
    parts = split_segments(remainder) if remainder else []
    return HybridEducation(
        degree=parts[0] if parts else "",
        institution=parts[1] if len(parts) > 1 else "",
        location=", ".join(parts[2:]),
        start_date=start,
        end_date=end,
    )


def _language_from_line(line: str) -> HybridLanguage:
    parts = split_segments(line)
    return HybridLanguage(language=parts[0] if parts else "", level=", ".join(parts[1:]))


def _experience_to_hybrid(item: Experience) -> HybridExperience:
    start, end, is_current = split_date_range(item.date)
    return HybridExperience(
        job_title=item.title,
        company=item.company,
        location=item.location,
        start_date=start,
        end_date=end,
        is_current=is_current,
        achievements=list(item.bullets),
    )


def map_structured_to_hybrid(structured: Any) -> HybridCvForm:
    """
    Lift a StructuredCv into the editable hybrid form.

    Education lines are split into degree, institution and location (plus
    dates when present); language lines into language and level. Skills
    become hard skills and additional items become certifications.

    Args:
        structured: StructuredCv or dict

    Returns:
        Sanitized HybridCvForm

    Example:
        >>> form = map_structured_to_hybrid(StructuredCv(education=["MSc CS — MIT"]))
        >>> form.education[0].institution
        'MIT'
    """
    safe = sanitize_structured_cv(structured)
    form = HybridCvForm(
        personal_info=HybridPersonalInfo(
            full_name=safe.contact.full_name,
            email=safe.contact.email,
            phone=safe.contact.phone,
        ),
        summary=safe.summary,
        experience=[_experience_to_hybrid(item) for item in safe.experiences],
        education=[_education_from_line(line) for line in safe.education],
        hard_skills=list(safe.skills),
        languages=[_language_from_line(line) for line in safe.languages],
        certifications=list(safe.additional),
    )
    return sanitize_hybrid_cv_form(form)


# =============================================================================
# HYBRID -> STRUCTURED
# =============================================================================


def format_date_range(item: HybridExperience) -> str:
    """
    Rebuild the free-text date of an experience.

    Example:
        >>> format_date_range(HybridExperience(start_date="2020", is_current=True))
        '2020 - Present'
        >>> format_date_range(HybridExperience(start_date="2018", end_date="2019"))
        '2018 - 2019'
    """
    if item.is_current:
        return f"{item.start_date} - {PRESENT_LABEL}".strip()
    if item.end_date:
        return f"{item.start_date} - {item.end_date}".strip(" -")
    return item.start_date


def _education_line(item: HybridEducation) -> str:
    dates = " - ".join(value for value in (item.start_date, item.end_date) if value)
    return FIELD_JOINER.join(value for value in (item.degree, item.institution, item.location, dates) if value)


def map_hybrid_to_structured(form: Any) -> StructuredCv:
    """
    Flatten a hybrid form back into a StructuredCv.

    Experiences are sorted most recent first and keep their first four
    achievements as bullets. Hard and soft skills are merged; certifications,
    volunteering and interests become additional items.

    Args:
        form: HybridCvForm or dict

    Returns:
        Sanitized StructuredCv
    """
    safe = sanitize_hybrid_cv_form(form)
    experiences = [
        Experience(
            title=item.job_title,
            company=item.company,
            date=format_date_range(item),
            location=item.location,
            bullets=item.achievements[:MAX_BULLETS],
        )
        for item in sort_experiences_most_recent(safe.experience)
    ]

    structured = StructuredCv(
        contact=ContactBlock(
            full_name=safe.personal_info.full_name,
            email=safe.personal_info.email,
            phone=safe.personal_info.phone,
        ),
        summary=safe.summary,
        experiences=experiences,
        education=[_education_line(item) for item in safe.education],
        skills=dedupe_casefold(safe.hard_skills + safe.soft_skills),
        languages=[FIELD_JOINER.join(value for value in (item.language, item.level) if value) for item in safe.languages],
        additional=dedupe_casefold(safe.certifications + safe.volunteering + safe.interests),
    )
    return sanitize_structured_cv(structured)
