"""Unit tests for structured résumé sanitization and AI merge."""

import pytest

from cvmiracle.contexts.structuring.data_structures import (
    ContactBlock,
    Experience,
    HybridCvForm,
    HybridExperience,
    StructuredCv,
)
from cvmiracle.contexts.structuring.sanitizer import (
    MAX_ACHIEVEMENTS,
    MAX_BULLETS,
    MAX_EDUCATION,
    MAX_SKILLS,
    merge_structured_cv,
    merge_with_fallback,
    sanitize_hybrid_cv_form,
    sanitize_structured_cv,
    split_skill_line,
)
from cvmiracle.utils.result import Result

MESSY_STRUCTURED = {
    "contact": {"fullName": "  Jane Roe ", "email": "jane@roe.dev", "phone": 612345678},
    "summary": "  Data engineer  ",
    "experiences": [
        {"title": "Engineer", "company": "Acme", "date": "2020 - 2022", "bullets": ["a", "A", "b", "c", "d", "e"]},
        {"title": "   ", "company": "Ghost"},
        "not an experience",
    ],
    "education": [f"Degree {index}" for index in range(20)],
    "skills": ["Python", "python", " ", None, 42] + [f"Skill {index}" for index in range(30)],
    "languages": "French",
}


@pytest.mark.unit
def test_split_skill_line_scenario_e():
    """Test splitting on commas and bullets."""
    assert split_skill_line("Python, Go, Rust • SQL") == ["Python", "Go", "Rust", "SQL"]


@pytest.mark.unit
def test_split_skill_line_drops_punctuation_chunks():
    """Test that chunks without letters or digits are dropped."""
    assert split_skill_line("Go | - | Rust;;") == ["Go", "Rust"]


@pytest.mark.unit
def test_sanitize_structured_cv_caps_and_dedupes():
    """Test caps, dedupe, coercion and experience filtering on messy input."""
    cv = sanitize_structured_cv(MESSY_STRUCTURED)

    assert cv.contact.full_name == "Jane Roe"
    assert cv.contact.phone == "612345678"
    assert cv.summary == "Data engineer"
    assert [item.title for item in cv.experiences] == ["Engineer"]
    assert cv.experiences[0].bullets == ["a", "b", "c", "d"]
    assert len(cv.experiences[0].bullets) <= MAX_BULLETS
    assert len(cv.education) == MAX_EDUCATION
    assert len(cv.skills) == MAX_SKILLS
    assert cv.skills[:2] == ["Python", "42"]
    assert cv.languages == []


@pytest.mark.unit
def test_sanitize_structured_cv_no_casefold_duplicates():
    """Test that no list keeps two items equal ignoring case."""
    cv = sanitize_structured_cv(MESSY_STRUCTURED)
    for values in (cv.education, cv.skills, cv.languages, cv.additional):
        assert len({value.casefold() for value in values}) == len(values)


@pytest.mark.unit
@pytest.mark.parametrize("data", [None, {}, MESSY_STRUCTURED, StructuredCv(summary=" x ")])
def test_sanitize_structured_cv_idempotent(data):
    """Test that sanitizing twice equals sanitizing once."""
    once = sanitize_structured_cv(data)
    assert sanitize_structured_cv(once) == once


@pytest.mark.unit
def test_sanitize_hybrid_cv_form_rules():
    """Test hybrid experience, education and language filtering."""
    form = sanitize_hybrid_cv_form(
        {
            "personalInfo": {"fullName": "Jane Roe", "email": "jane@roe.dev"},
            "experience": [
                {"jobTitle": "", "company": "", "startDate": "", "achievements": []},
                {"company": "Acme", "startDate": " Jan   2020 ", "isCurrent": "oui", "achievements": list("abcdefgh")},
            ],
            "education": [{"degree": "MSc"}, {"location": "Paris"}],
            "languages": [{"language": "French", "level": "Native"}, {"language": "french"}, {"level": "B2"}],
        }
    )

    assert form.personal_info.full_name == "Jane Roe"
    assert len(form.experience) == 1
    item = form.experience[0]
    assert item.start_date == "Jan 2020"
    assert item.is_current is True
    assert len(item.achievements) == MAX_ACHIEVEMENTS
    assert [entry.degree for entry in form.education] == ["MSc"]
    assert [language.language for language in form.languages] == ["French"]


@pytest.mark.unit
@pytest.mark.parametrize("data", [None, HybridCvForm(), HybridCvForm(experience=[HybridExperience(company=" Acme ")])])
def test_sanitize_hybrid_cv_form_idempotent(data):
    """Test hybrid sanitization idempotence, including empty input."""
    once = sanitize_hybrid_cv_form(data)
    assert sanitize_hybrid_cv_form(once) == once


@pytest.mark.unit
def test_merge_without_ai_scenario_d():
    """Test that merging with no AI output returns the sanitized heuristic unchanged."""
    heuristic = StructuredCv(
        contact=ContactBlock(full_name="John Doe", email="john@doe.com"),
        experiences=[Experience("Senior Engineer", "Acme Corp", "2020 - Present", bullets=["Shipped X"])],
        skills=["Python"],
    )
    assert merge_structured_cv(heuristic, None) == sanitize_structured_cv(heuristic)
    assert merge_structured_cv(heuristic, None) == heuristic


@pytest.mark.unit
def test_merge_prefers_non_empty_ai_fields():
    """Test field-level override with individual contact fields."""
    heuristic = StructuredCv(
        contact=ContactBlock(full_name="John Doe", email="john@doe.com", phone="0612345678"),
        summary="Heuristic summary",
        skills=["Python"],
    )
    ai = {"contact": {"email": "j.doe@acme.com"}, "summary": "", "skills": ["Go", "Rust"]}

    merged = merge_structured_cv(heuristic, ai)

    assert merged.contact.full_name == "John Doe"
    assert merged.contact.email == "j.doe@acme.com"
    assert merged.contact.phone == "0612345678"
    assert merged.summary == "Heuristic summary"
    assert merged.skills == ["Go", "Rust"]


@pytest.mark.unit
def test_merge_with_fallback_on_failed_result():
    """Test that a failed AI Result falls back to the heuristic parse."""
    heuristic = StructuredCv(skills=["Python"])
    merged = merge_with_fallback(heuristic, Result.failure("timeout"))
    assert merged == heuristic


@pytest.mark.unit
def test_merge_with_fallback_unwraps_success():
    """Test that a successful Result is merged."""
    heuristic = StructuredCv(skills=["Python"])
    merged = merge_with_fallback(heuristic, Result.success(StructuredCv(summary="From AI")))
    assert merged.summary == "From AI"
    assert merged.skills == ["Python"]
