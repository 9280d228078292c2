"""
Completeness validation and confidence scoring for the hybrid form.

Validation failures are data: get_hybrid_validation_issues() returns a list
of French messages and the caller decides whether generation is blocked
(any issue blocks it). Nothing here raises or logs above DEBUG.
"""

import math
from typing import List, Optional, Sequence

from cvmiracle.contexts.structuring.data_structures import HybridConfidence, HybridCvForm, StructuredCv
from cvmiracle.contexts.structuring.hybrid_mapping import map_structured_to_hybrid
from cvmiracle.contexts.structuring.logger import _log_debug
from cvmiracle.contexts.structuring.sanitizer import sanitize_hybrid_cv_form

GOLDEN_RULE_PREFIX = "Golden rule non respectée"

# Suggestion thresholds on category scores
SUMMARY_SUGGESTION_BELOW = 60
EXPERIENCE_SUGGESTION_BELOW = 80
HARD_SKILLS_SUGGESTION_BELOW = 70

SUGGESTION_SUMMARY = "Compléter le résumé professionnel."
SUGGESTION_EXPERIENCE = "Ajouter des missions chiffrées par expérience."
SUGGESTION_HARD_SKILLS = "Ajouter davantage de hard skills spécifiques."
SUGGESTION_OVERLAPS = "Vérifier les chevauchements de dates détectés."


def _as_form(cv) -> HybridCvForm:
    if isinstance(cv, StructuredCv):
        return map_structured_to_hybrid(cv)
    return sanitize_hybrid_cv_form(cv)


def get_hybrid_validation_issues(cv) -> List[str]:
    """
    List the blocking gaps of a résumé, in French.

    Checks the contact block (name, email, phone), that at least one
    experience exists, and for every experience its title, company,
    location, dates and achievements.

    Args:
        cv: HybridCvForm, StructuredCv, or dict in hybrid shape

    Returns:
        Issues in display order; empty when the résumé is complete

    Example:
        >>> issues = get_hybrid_validation_issues(HybridCvForm())
        >>> issues[:2]
        ['Nom complet manquant.', 'Email manquant.']
    """
    form = _as_form(cv)
    issues = []

    personal = form.personal_info
    if not personal.full_name:
        issues.append("Nom complet manquant.")
    if not personal.email:
        issues.append("Email manquant.")
    if not personal.phone:
        issues.append("Téléphone manquant.")

    if not form.experience:
        issues.append("Ajoute au moins une expérience.")

    for rank, item in enumerate(form.experience, start=1):
        if not item.job_title:
            issues.append(f"Expérience {rank}: Nom du poste manquant.")
        if not item.company:
            issues.append(f"Expérience {rank}: Entreprise manquante.")
        if not item.location:
            issues.append(f"Expérience {rank}: Lieu manquant.")
        if not item.start_date and not item.end_date:
            issues.append(f"Expérience {rank}: Dates manquantes.")
        if not item.achievements:
            issues.append(f"Expérience {rank}: Missions manquantes.")

    _log_debug(f"Validation found {len(issues)} issues")
    return issues


def first_blocking_issue(issues: Sequence[str]) -> Optional[str]:
    """Return the first issue, or None when generation may proceed."""
    return issues[0] if issues else None


def golden_rule_message(issues: Sequence[str]) -> Optional[str]:
    """
    Format the user-facing refusal for a blocked generation.

    Example:
        >>> golden_rule_message(["Email manquant."])
        'Golden rule non respectée: Email manquant.'
        >>> golden_rule_message([]) is None
        True
    """
    issue = first_blocking_issue(issues)
    return f"{GOLDEN_RULE_PREFIX}: {issue}" if issue else None


# =============================================================================
# CONFIDENCE
# =============================================================================


def _score(value: float) -> int:
    # Half-up rounding so 62.5 scores 63
    return max(0, min(100, math.floor(value + 0.5)))


def _presence(items, present: int, absent: int) -> int:
    return _score(present if items else absent)


def _skills_score(skills: Sequence[str]) -> int:
    return _score(min(100, 35 + len(skills) * 7) if skills else 25)


def _experience_score(form: HybridCvForm) -> int:
    if not form.experience:
        return _score(20)

    scores = []
    for item in form.experience:
        required = [item.job_title, item.company, item.location, item.start_date or item.end_date]
        filled = sum(1 for value in required if value) / len(required)
        boost = 0.2 if item.achievements else 0.0
        scores.append(min(1.0, filled + boost) * 100)
    return _score(sum(scores) / len(scores))


def compute_hybrid_confidence(cv) -> HybridConfidence:
    """
    Score how complete each part of the résumé is.

    Scores are integers in [0, 100]. Personal info is the share of its five
    fields filled; each experience scores the share of title, company,
    location and dates filled, plus 0.2 when it has achievements (capped at
    1); list sections score a fixed value when present and a lower one when
    empty; skills grow by 7 per item from 35. The global score is the
    rounded mean of the ten categories.

    Args:
        cv: HybridCvForm, StructuredCv, or dict in hybrid shape

    Returns:
        HybridConfidence
    """
    form = _as_form(cv)
    personal = form.personal_info
    personal_fields = [personal.full_name, personal.city, personal.phone, personal.email, personal.linkedin]

    scores = dict(
        personal_info=_score(sum(1 for value in personal_fields if value) / len(personal_fields) * 100),
        summary=_presence(form.summary, 100, 20),
        experience=_experience_score(form),
        education=_presence(form.education, 85, 35),
        hard_skills=_skills_score(form.hard_skills),
        soft_skills=_skills_score(form.soft_skills),
        languages=_presence(form.languages, 80, 30),
        certifications=_presence(form.certifications, 80, 30),
        volunteering=_presence(form.volunteering, 75, 25),
        interests=_presence(form.interests, 70, 20),
    )
    return HybridConfidence(**scores, global_score=_score(sum(scores.values()) / len(scores)))


def suggested_improvements(confidence: HybridConfidence, overlap_warnings: Sequence[str] = ()) -> List[str]:
    """
    Canned improvement hints derived from the confidence scores.

    Example:
        >>> weak = compute_hybrid_confidence(HybridCvForm())
        >>> suggested_improvements(weak)[0]
        'Compléter le résumé professionnel.'
    """
    suggestions = []
    if confidence.summary < SUMMARY_SUGGESTION_BELOW:
        suggestions.append(SUGGESTION_SUMMARY)
    if confidence.experience < EXPERIENCE_SUGGESTION_BELOW:
        suggestions.append(SUGGESTION_EXPERIENCE)
    if confidence.hard_skills < HARD_SKILLS_SUGGESTION_BELOW:
        suggestions.append(SUGGESTION_HARD_SKILLS)
    if overlap_warnings:
        suggestions.append(SUGGESTION_OVERLAPS)
    return suggestions
