"""
Sanitization and merge rules for structured résumés.

sanitize_structured_cv() and sanitize_hybrid_cv_form() are total: they accept
dataclass instances, dicts (snake_case or camelCase keys, e.g. decoded AI
output) or None, and never raise. Every string is trimmed, empty entries are
dropped, string lists are deduplicated case-insensitively (first seen wins)
and capped. Sanitizing twice gives the same result as sanitizing once.
"""

import re
from typing import Any, List, Optional, Union

from cvmiracle.contexts.structuring.data_structures import (
    ContactBlock,
    Experience,
    HybridCvForm,
    HybridEducation,
    HybridExperience,
    HybridLanguage,
    HybridPersonalInfo,
    StructuredCv,
    read_field,
)
from cvmiracle.contexts.structuring.logger import _log_debug, log_ai_failure
from cvmiracle.utils.result import Result
from cvmiracle.utils.text_processing import clean_string_list, coerce_text, collapse_whitespace

# StructuredCv caps
MAX_BULLETS = 4
MAX_EDUCATION = 14
MAX_SKILLS = 18
MAX_LANGUAGES = 10
MAX_ADDITIONAL = 12

# HybridCvForm caps
MAX_ACHIEVEMENTS = 6
MAX_HYBRID_SKILLS = 30
MAX_HYBRID_EXTRAS = 20

SKILL_SEPARATORS = re.compile(r"[,|•·;]")


def split_skill_line(line: str) -> List[str]:
    """
    Split a skills line on commas, pipes, bullets and semicolons.

    Chunks without any letter or digit are dropped.

    Example:
        >>> split_skill_line("Python, Go, Rust • SQL")
        ['Python', 'Go', 'Rust', 'SQL']
    """
    chunks = (chunk.strip() for chunk in SKILL_SEPARATORS.split(line or ""))
    return [chunk for chunk in chunks if any(char.isalnum() for char in chunk)]


def _items(value: Any) -> list:
    return list(value) if isinstance(value, (list, tuple)) else []


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "oui")
    return bool(value)


# =============================================================================
# STRUCTURED CV
# =============================================================================


def _sanitize_experience(raw: Any) -> Optional[Experience]:
    title = coerce_text(read_field(raw, "title"))
    if not title:
        return None
    return Experience(
        title=title,
        company=coerce_text(read_field(raw, "company")),
        date=coerce_text(read_field(raw, "date")),
        location=coerce_text(read_field(raw, "location")),
        bullets=clean_string_list(read_field(raw, "bullets"), MAX_BULLETS),
    )


def sanitize_structured_cv(data: Any) -> StructuredCv:
    """
    Coerce any input into a clean StructuredCv.

    Args:
        data: StructuredCv, dict, or None

    Returns:
        New StructuredCv; experiences without a title are dropped

    Example:
        >>> cv = sanitize_structured_cv({"skills": [" Python", "python", ""]})
        >>> cv.skills
        ['Python']
    """
    contact = read_field(data, "contact")
    experiences = [_sanitize_experience(item) for item in _items(read_field(data, "experiences"))]

    return StructuredCv(
        contact=ContactBlock(
            full_name=coerce_text(read_field(contact, "full_name")),
            email=coerce_text(read_field(contact, "email")),
            phone=coerce_text(read_field(contact, "phone")),
        ),
        summary=coerce_text(read_field(data, "summary")),
        experiences=[item for item in experiences if item is not None],
        education=clean_string_list(read_field(data, "education"), MAX_EDUCATION),
        skills=clean_string_list(read_field(data, "skills"), MAX_SKILLS),
        languages=clean_string_list(read_field(data, "languages"), MAX_LANGUAGES),
        additional=clean_string_list(read_field(data, "additional"), MAX_ADDITIONAL),
    )


# =============================================================================
# HYBRID FORM
# =============================================================================


def _date_text(value: Any) -> str:
    return collapse_whitespace(coerce_text(value))


def _sanitize_hybrid_experience(raw: Any) -> Optional[HybridExperience]:
    item = HybridExperience(
        job_title=coerce_text(read_field(raw, "job_title")),
        company=coerce_text(read_field(raw, "company")),
        location=coerce_text(read_field(raw, "location")),
        start_date=_date_text(read_field(raw, "start_date")),
        end_date=_date_text(read_field(raw, "end_date")),
        is_current=_coerce_bool(read_field(raw, "is_current", False)),
        achievements=clean_string_list(read_field(raw, "achievements"), MAX_ACHIEVEMENTS),
    )
    if item.job_title or item.company or item.start_date or item.end_date or item.achievements:
        return item
    return None


def _sanitize_hybrid_education(raw: Any) -> Optional[HybridEducation]:
    item = HybridEducation(
        degree=coerce_text(read_field(raw, "degree")),
        institution=coerce_text(read_field(raw, "institution")),
        location=coerce_text(read_field(raw, "location")),
        start_date=_date_text(read_field(raw, "start_date")),
        end_date=_date_text(read_field(raw, "end_date")),
    )
    return item if item.degree or item.institution else None


def _sanitize_hybrid_languages(values: Any) -> List[HybridLanguage]:
    languages = []
    seen = set()
    for raw in _items(values):
        item = HybridLanguage(
            language=coerce_text(read_field(raw, "language")),
            level=coerce_text(read_field(raw, "level")),
        )
        key = item.language.casefold()
        if not item.language or key in seen:
            continue
        seen.add(key)
        languages.append(item)
    return languages


def sanitize_hybrid_cv_form(data: Any) -> HybridCvForm:
    """
    Coerce any input into a clean HybridCvForm.

    Experiences are kept when any of title, company, dates or achievements is
    set; education when degree or institution is set; languages when the
    language name is set (deduplicated by name).

    Args:
        data: HybridCvForm, dict, or None

    Returns:
        New HybridCvForm
    """
    personal = read_field(data, "personal_info")
    experience = [_sanitize_hybrid_experience(item) for item in _items(read_field(data, "experience"))]
    education = [_sanitize_hybrid_education(item) for item in _items(read_field(data, "education"))]

    return HybridCvForm(
        personal_info=HybridPersonalInfo(
            full_name=coerce_text(read_field(personal, "full_name")),
            city=coerce_text(read_field(personal, "city")),
            phone=coerce_text(read_field(personal, "phone")),
            email=coerce_text(read_field(personal, "email")),
            linkedin=coerce_text(read_field(personal, "linkedin")),
        ),
        summary=coerce_text(read_field(data, "summary")),
        experience=[item for item in experience if item is not None],
        education=[item for item in education if item is not None],
        hard_skills=clean_string_list(read_field(data, "hard_skills"), MAX_HYBRID_SKILLS),
        soft_skills=clean_string_list(read_field(data, "soft_skills"), MAX_HYBRID_SKILLS),
        languages=_sanitize_hybrid_languages(read_field(data, "languages")),
        certifications=clean_string_list(read_field(data, "certifications"), MAX_HYBRID_EXTRAS),
        volunteering=clean_string_list(read_field(data, "volunteering"), MAX_HYBRID_EXTRAS),
        interests=clean_string_list(read_field(data, "interests"), MAX_HYBRID_EXTRAS),
    )


# =============================================================================
# AI MERGE
# =============================================================================


def merge_structured_cv(heuristic: Any, ai: Any = None) -> StructuredCv:
    """
    Overlay an AI extraction on a heuristic parse, field by field.

    An AI field replaces the heuristic field only when it is non-empty after
    sanitization. Contact sub-fields are merged individually. The merged
    result is sanitized again.

    Args:
        heuristic: Heuristic StructuredCv (or dict)
        ai: AI StructuredCv (or dict), or None when unavailable

    Returns:
        Merged StructuredCv; the sanitized heuristic when ai is None
    """
    base = sanitize_structured_cv(heuristic)
    if ai is None:
        return base

    override = sanitize_structured_cv(ai)
    merged = StructuredCv(
        contact=ContactBlock(
            full_name=override.contact.full_name or base.contact.full_name,
            email=override.contact.email or base.contact.email,
            phone=override.contact.phone or base.contact.phone,
        ),
        summary=override.summary or base.summary,
        experiences=override.experiences or base.experiences,
        education=override.education or base.education,
        skills=override.skills or base.skills,
        languages=override.languages or base.languages,
        additional=override.additional or base.additional,
    )
    return sanitize_structured_cv(merged)


def merge_with_fallback(heuristic: Any, ai_result: Union[Result, StructuredCv, dict, None]) -> StructuredCv:
    """
    Merge whatever the AI collaborator produced, falling back to heuristics.

    Args:
        heuristic: Heuristic StructuredCv
        ai_result: A Result from an extraction call, a raw AI value, or None

    Returns:
        Merged StructuredCv
    """
    if isinstance(ai_result, Result):
        if not ai_result.ok:
            log_ai_failure("Structured extraction", ai_result.error)
            return merge_structured_cv(heuristic, None)
        ai_result = ai_result.value

    if ai_result is None:
        _log_debug("No AI extraction provided, heuristic parse kept as-is")
    return merge_structured_cv(heuristic, ai_result)
