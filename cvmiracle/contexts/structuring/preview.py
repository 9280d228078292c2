"""
Structure preview: the payload shown to the user before generation.

Combines the heuristic parse, optional AI output (structured extraction and
per-experience summaries), confidence scores, overlap warnings and
improvement hints. AI inputs are optional and fallible; the preview is
always built, falling back to heuristics.
"""

from dataclasses import dataclass, field, replace
from typing import Any, List, Optional, Sequence, Union

from cvmiracle.contexts.structuring.data_structures import (
    HybridConfidence,
    HybridCvForm,
    StructuredCv,
)
from cvmiracle.contexts.structuring.dates import detect_date_overlaps, sort_experiences_most_recent
from cvmiracle.contexts.structuring.heuristic_parser import extract_contact_from_text, parse_structured_cv_from_text
from cvmiracle.contexts.structuring.hybrid_mapping import map_hybrid_to_structured, map_structured_to_hybrid
from cvmiracle.contexts.structuring.logger import log_ai_failure, log_preview_result
from cvmiracle.contexts.structuring.sanitizer import MAX_ACHIEVEMENTS, merge_with_fallback
from cvmiracle.contexts.structuring.validation import compute_hybrid_confidence, suggested_improvements
from cvmiracle.utils.result import Result
from cvmiracle.utils.text_processing import coerce_text

SOURCE_HEURISTIC = "heuristic"
SOURCE_HYBRID = "hybrid"
SOURCE_HYBRID_SUMMARIES = "hybrid-summaries"


@dataclass
class StructurePreview:
    """Everything the correction screen needs about a parsed résumé."""

    structured_cv: StructuredCv
    hybrid_form: HybridCvForm
    source: str
    confidence: HybridConfidence
    overlap_warnings: List[str] = field(default_factory=list)
    suggested_improvements: List[str] = field(default_factory=list)
    experience_summaries: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "structured_cv": self.structured_cv.to_dict(),
            "hybrid_form": self.hybrid_form.to_dict(),
            "source": self.source,
            "confidence": self.confidence.to_dict(),
            "overlap_warnings": list(self.overlap_warnings),
            "suggested_improvements": list(self.suggested_improvements),
            "experience_summaries": list(self.experience_summaries),
        }


def apply_experience_summaries(form: HybridCvForm, summaries: Optional[Sequence[str]]) -> HybridCvForm:
    """
    Prepend one AI summary to each experience, most recent first.

    Experiences are sorted first; summaries[i] goes to the i-th sorted entry.
    A summary already present among the achievements (case-insensitive) is
    not added twice, and achievements stay capped at 6.

    Args:
        form: Sanitized HybridCvForm
        summaries: Summaries in most-recent-first order, or None

    Returns:
        New HybridCvForm with sorted experiences
    """
    summaries = list(summaries or [])
    experience = []
    for index, entry in enumerate(sort_experiences_most_recent(form.experience)):
        summary = coerce_text(summaries[index]) if index < len(summaries) else ""
        known = {item.casefold() for item in entry.achievements}
        if summary and summary.casefold() not in known:
            entry = replace(entry, achievements=[summary, *entry.achievements][:MAX_ACHIEVEMENTS])
        experience.append(entry)
    return replace(form, experience=experience)


def _resolve_summaries(experience_summaries: Union[Result, Sequence[str], None]) -> List[str]:
    if isinstance(experience_summaries, Result):
        if not experience_summaries.ok:
            log_ai_failure("Experience summaries", experience_summaries.error)
            return []
        experience_summaries = experience_summaries.value
    return [item for item in (coerce_text(value) for value in experience_summaries or []) if item]


def _ai_available(ai_structured: Any) -> bool:
    if isinstance(ai_structured, Result):
        return ai_structured.ok and ai_structured.value is not None
    return ai_structured is not None


def build_structure_preview(
    cv_text: str,
    ai_structured: Union[Result, StructuredCv, dict, None] = None,
    experience_summaries: Union[Result, Sequence[str], None] = None,
) -> StructurePreview:
    """
    Build the structure preview for a résumé.

    Args:
        cv_text: Extracted résumé text
        ai_structured: Optional AI extraction (Result, StructuredCv or dict)
        experience_summaries: Optional AI summaries (Result or list of strings)

    Returns:
        StructurePreview whose source is "hybrid-summaries" when summaries
        were applied, "hybrid" when only an AI extraction was merged, and
        "heuristic" otherwise

    Example:
        >>> preview = build_structure_preview("Skills\\nPython, Go")
        >>> preview.source, preview.structured_cv.skills
        ('heuristic', ['Python', 'Go'])
    """
    heuristic = parse_structured_cv_from_text(cv_text)
    structured = merge_with_fallback(heuristic, ai_structured)

    form = map_structured_to_hybrid(structured)
    contact = extract_contact_from_text(cv_text)
    form = replace(
        form,
        personal_info=replace(
            form.personal_info,
            city=form.personal_info.city or contact.location,
            linkedin=form.personal_info.linkedin or contact.website,
        ),
    )

    summaries = _resolve_summaries(experience_summaries)
    form = apply_experience_summaries(form, summaries)

    confidence = compute_hybrid_confidence(form)
    overlaps = detect_date_overlaps(form.experience)

    if summaries:
        source = SOURCE_HYBRID_SUMMARIES
    elif _ai_available(ai_structured):
        source = SOURCE_HYBRID
    else:
        source = SOURCE_HEURISTIC

    preview = StructurePreview(
        structured_cv=map_hybrid_to_structured(form),
        hybrid_form=form,
        source=source,
        confidence=confidence,
        overlap_warnings=overlaps,
        suggested_improvements=suggested_improvements(confidence, overlaps),
        experience_summaries=summaries,
    )
    log_preview_result(preview)
    return preview
