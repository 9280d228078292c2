"""Unit tests for the heuristic résumé parser."""

import pytest

from cvmiracle.contexts.structuring.heuristic_parser import (
    extract_contact_from_text,
    parse_structured_cv_from_text,
    split_contact_lines,
)


@pytest.mark.unit
def test_scenario_a(scenario_a_text):
    """Test contact, experience and education extraction on a minimal résumé."""
    cv = parse_structured_cv_from_text(scenario_a_text)

    assert cv.contact.full_name == "John Doe"
    assert cv.contact.email == "john@doe.com"
    assert cv.contact.phone == "+33 6 12 34 56 78"
    assert len(cv.experiences) == 1
    experience = cv.experiences[0]
    assert (experience.title, experience.company, experience.date) == ("Senior Engineer", "Acme Corp", "2020 - Present")
    assert experience.bullets == ["Shipped X", "Led Y"]
    assert cv.education == ["MSc CS — MIT"]
    assert cv.summary == ""


@pytest.mark.unit
def test_contact_lines_are_removed_from_body(scenario_a_text):
    """Test that consumed contact lines do not reach section parsing."""
    body, extraction = split_contact_lines(scenario_a_text)

    assert "john@doe.com" not in body
    assert body[0] == "Experience"
    assert extraction.contact.full_name == "John Doe"


@pytest.mark.unit
def test_extract_contact_from_text(scenario_a_text):
    """Test the contact-only helper."""
    assert extract_contact_from_text(scenario_a_text).email == "john@doe.com"


@pytest.mark.unit
def test_skills_and_languages_are_split():
    """Test separator splitting for skills and languages (scenario E)."""
    cv = parse_structured_cv_from_text("Skills\nPython, Go, Rust • SQL\nLanguages\nFrench | English")
    assert cv.skills == ["Python", "Go", "Rust", "SQL"]
    assert cv.languages == ["French", "English"]


@pytest.mark.unit
def test_text_before_first_heading_becomes_summary():
    """Test that an introduction before any heading is used as the summary."""
    cv = parse_structured_cv_from_text(
        "Engineer with ten years of experience in data platforms.\nSkills\nPython, Go"
    )
    assert cv.summary == "Engineer with ten years of experience in data platforms."
    assert cv.skills == ["Python", "Go"]


@pytest.mark.unit
def test_empty_text_gives_empty_cv():
    """Test that empty input yields an empty, valid structure."""
    cv = parse_structured_cv_from_text("")
    assert cv.experiences == []
    assert cv.skills == []
    assert cv.contact.full_name == ""
