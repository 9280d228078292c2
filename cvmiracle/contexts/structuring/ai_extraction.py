"""
LLM-backed extraction, treated as a fallible collaborator.

Every public function returns a Result. Provider construction errors
(unknown provider, missing API key, SDK not installed), API failures and
unusable JSON all become Result.failure(...) here, so the structuring core
never sees an exception from this module. Successful payloads are sanitized
before they are returned.
"""

import json
from dataclasses import dataclass, field
from typing import List, Optional

from cvmiracle.contexts.structuring.data_structures import HybridCvForm, StructuredCv
from cvmiracle.contexts.structuring.logger import _log_debug, log_ai_failure
from cvmiracle.contexts.structuring.sanitizer import sanitize_hybrid_cv_form, sanitize_structured_cv
from cvmiracle.utils.llm import LLMProvider, get_provider, parse_array_response, parse_object_response
from cvmiracle.utils.result import Result
from cvmiracle.utils.text_processing import clean_string_list, coerce_text

MAX_PROMPT_CHARS = 20000
MAX_SUMMARY_CHARS = 220
MIN_OPTIMIZED_CHARS = 50
MAX_KEYWORDS = 20
MAX_MISSING_SKILLS = 20

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_STRUCTURE_SYSTEM_PROMPT = """\
You convert résumé text into JSON. Return ONLY a JSON object.
Never invent facts that are not present in the résumé."""

_STRUCTURE_USER_TEMPLATE = """\
Return a JSON object with exactly these keys:
{schema}

Keep experiences most recent first, at most 4 bullets each.
The job offer is context only; do not copy it into the résumé.

---
Job offer:
{job_text}

---
Résumé:
{cv_text}"""

_STRUCTURED_CV_SCHEMA = {
    "contact": {"full_name": "string", "email": "string", "phone": "string"},
    "summary": "string",
    "experiences": [
        {"title": "string", "company": "string", "date": "string", "location": "string", "bullets": ["string"]}
    ],
    "education": ["string"],
    "skills": ["string"],
    "languages": ["string"],
    "additional": ["string"],
}

_HYBRID_FORM_SCHEMA = {
    "personal_info": {"full_name": "string", "city": "string", "phone": "string", "email": "string", "linkedin": "string"},
    "summary": "string",
    "experience": [
        {
            "job_title": "string",
            "company": "string",
            "location": "string",
            "start_date": "string",
            "end_date": "string",
            "is_current": "boolean",
            "achievements": ["string"],
        }
    ],
    "education": [
        {"degree": "string", "institution": "string", "location": "string", "start_date": "string", "end_date": "string"}
    ],
    "hard_skills": ["string"],
    "soft_skills": ["string"],
    "languages": [{"language": "string", "level": "string"}],
    "certifications": ["string"],
    "volunteering": ["string"],
    "interests": ["string"],
}

_SUMMARIES_SYSTEM_PROMPT = """\
You write one-sentence summaries of résumé experiences. Return ONLY a JSON array of strings."""

_SUMMARIES_USER_TEMPLATE = """\
Write one factual sentence (max {max_chars} characters) per experience below,
most recent first, in the résumé's language. Return a JSON array with one
string per experience.

---
Experiences:
{experiences}"""

_OPTIMIZE_SYSTEM_PROMPT = """\
You tailor résumés to job offers without inventing experience. Return ONLY a JSON object."""

_OPTIMIZE_USER_TEMPLATE = """\
Rewrite the résumé so it targets the job offer. Return a JSON object with keys:
"optimizedResume" (string, full résumé text), "matchScore" (integer 0-100),
"keywordsIntegrated" (array of 1-20 strings), "missingSkills" (array of at most 20 strings).

---
Job offer:
{job_text}

---
Résumé:
{cv_text}"""


@dataclass
class ResumeOptimization:
    """Job-targeted rewrite of a résumé with match diagnostics."""

    optimized_resume: str
    match_score: int
    keywords_integrated: List[str] = field(default_factory=list)
    missing_skills: List[str] = field(default_factory=list)


# =============================================================================
# PROVIDER CALLS
# =============================================================================


def _complete(provider: Optional[LLMProvider], system_prompt: str, user_prompt: str) -> Result[str]:
    """Run one completion, converting every provider failure into a Result."""
    try:
        llm = provider or get_provider()
        response = llm.generate(system_prompt=system_prompt, user_prompt=user_prompt)
    except (ImportError, ValueError) as e:
        return Result.failure(f"LLM provider unavailable: {e}")
    except Exception as e:  # provider SDK errors
        return Result.failure(f"LLM call failed: {type(e).__name__}: {e}")

    _log_debug(
        f"LLM {llm.name}: {response.input_tokens} input tokens, {response.output_tokens} output tokens"
    )
    return Result.success(response.content)


def _structure_prompt(schema: dict, cv_text: str, job_text: str) -> str:
    return _STRUCTURE_USER_TEMPLATE.format(
        schema=json.dumps(schema, indent=2),
        job_text=(job_text or "")[:MAX_PROMPT_CHARS],
        cv_text=(cv_text or "")[:MAX_PROMPT_CHARS],
    )


def _failed(operation: str, error: str) -> Result:
    log_ai_failure(operation, error)
    return Result.failure(error)


def _object_call(operation: str, provider, system_prompt: str, user_prompt: str) -> Result[dict]:
    raw = _complete(provider, system_prompt, user_prompt)
    if not raw.ok:
        return _failed(operation, raw.error)
    payload = parse_object_response(raw.value)
    if payload is None:
        return _failed(operation, "response is not a JSON object")
    return Result.success(payload)


# =============================================================================
# EXTRACTION FUNCTIONS
# =============================================================================


def extract_structured_cv_with_llm(
    cv_text: str,
    job_text: str = "",
    provider: Optional[LLMProvider] = None,
) -> Result[StructuredCv]:
    """
    Ask the LLM for a StructuredCv.

    Args:
        cv_text: Extracted résumé text
        job_text: Job offer text, used as context only
        provider: LLM provider (default: get_provider() from environment)

    Returns:
        Result holding a sanitized StructuredCv, or the failure reason
    """
    operation = "Structured extraction"
    payload = _object_call(
        operation, provider, _STRUCTURE_SYSTEM_PROMPT, _structure_prompt(_STRUCTURED_CV_SCHEMA, cv_text, job_text)
    )
    if not payload.ok:
        return payload

    structured = sanitize_structured_cv(payload.value)
    if not (structured.summary or structured.experiences or structured.skills):
        return _failed(operation, "response has no usable résumé content")
    return Result.success(structured)


def extract_hybrid_cv_form_with_llm(
    cv_text: str,
    job_text: str = "",
    provider: Optional[LLMProvider] = None,
) -> Result[HybridCvForm]:
    """
    Ask the LLM for a HybridCvForm.

    Args:
        cv_text: Extracted résumé text
        job_text: Job offer text, used as context only
        provider: LLM provider (default: get_provider() from environment)

    Returns:
        Result holding a sanitized HybridCvForm, or the failure reason
    """
    operation = "Hybrid form extraction"
    payload = _object_call(
        operation, provider, _STRUCTURE_SYSTEM_PROMPT, _structure_prompt(_HYBRID_FORM_SCHEMA, cv_text, job_text)
    )
    if not payload.ok:
        return payload

    form = sanitize_hybrid_cv_form(payload.value)
    if not (form.summary or form.experience):
        return _failed(operation, "response has no usable résumé content")
    return Result.success(form)


def extract_experience_summaries_with_llm(
    structured: StructuredCv,
    provider: Optional[LLMProvider] = None,
) -> Result[List[str]]:
    """
    Ask the LLM for one summary sentence per experience.

    Args:
        structured: StructuredCv whose experiences are summarized (in order)
        provider: LLM provider (default: get_provider() from environment)

    Returns:
        Result holding summaries (empty strings dropped, at most one per experience)
    """
    operation = "Experience summaries"
    if not structured.experiences:
        return Result.success([])

    described = [
        {"title": item.title, "company": item.company, "date": item.date, "bullets": item.bullets}
        for item in structured.experiences
    ]
    user_prompt = _SUMMARIES_USER_TEMPLATE.format(
        max_chars=MAX_SUMMARY_CHARS,
        experiences=json.dumps(described, ensure_ascii=False, indent=2),
    )
    raw = _complete(provider, _SUMMARIES_SYSTEM_PROMPT, user_prompt)
    if not raw.ok:
        return _failed(operation, raw.error)

    count = len(structured.experiences)
    summaries = [coerce_text(item)[:MAX_SUMMARY_CHARS] for item in parse_array_response(raw.value, count)]
    summaries = [item for item in summaries if item][:count]
    if not summaries:
        return _failed(operation, "response has no summaries")
    return Result.success(summaries)


def _score(value) -> Optional[int]:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return score if 0 <= score <= 100 else None


def optimize_resume_with_llm(
    cv_text: str,
    job_text: str,
    provider: Optional[LLMProvider] = None,
) -> Result[ResumeOptimization]:
    """
    Ask the LLM to tailor a résumé to a job offer.

    The response must carry an optimized résumé of at least 50 characters,
    an integer match score in [0, 100] and 1 to 20 integrated keywords.

    Args:
        cv_text: Extracted résumé text
        job_text: Cleaned job offer text
        provider: LLM provider (default: get_provider() from environment)

    Returns:
        Result holding a ResumeOptimization, or the failure reason
    """
    operation = "Résumé optimization"
    payload = _object_call(
        operation,
        provider,
        _OPTIMIZE_SYSTEM_PROMPT,
        _OPTIMIZE_USER_TEMPLATE.format(
            job_text=(job_text or "")[:MAX_PROMPT_CHARS],
            cv_text=(cv_text or "")[:MAX_PROMPT_CHARS],
        ),
    )
    if not payload.ok:
        return payload

    data = payload.value
    optimized = coerce_text(data.get("optimizedResume") or data.get("optimized_resume"))
    score = _score(data.get("matchScore", data.get("match_score")))
    keywords = clean_string_list(data.get("keywordsIntegrated") or data.get("keywords_integrated"), MAX_KEYWORDS)
    missing = clean_string_list(data.get("missingSkills") or data.get("missing_skills"), MAX_MISSING_SKILLS)

    if len(optimized) < MIN_OPTIMIZED_CHARS:
        return _failed(operation, "optimized résumé is too short")
    if score is None:
        return _failed(operation, "match score is missing or out of range")
    if not keywords:
        return _failed(operation, "no integrated keywords")

    return Result.success(
        ResumeOptimization(
            optimized_resume=optimized,
            match_score=score,
            keywords_integrated=keywords,
            missing_skills=missing,
        )
    )
