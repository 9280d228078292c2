"""Unit tests for StructuredCv <-> HybridCvForm conversion."""

import pytest

from cvmiracle.contexts.structuring.data_structures import (
    ContactBlock,
    Experience,
    HybridCvForm,
    HybridEducation,
    HybridExperience,
    HybridLanguage,
    StructuredCv,
)
from cvmiracle.contexts.structuring.hybrid_mapping import (
    create_empty_hybrid_cv_form,
    format_date_range,
    map_hybrid_to_structured,
    map_structured_to_hybrid,
)


@pytest.fixture
def structured():
    return StructuredCv(
        contact=ContactBlock(full_name="John Doe", email="john@doe.com", phone="0612345678"),
        summary="Engineer",
        experiences=[
            Experience("Senior Engineer", "Acme Corp", "2020 - Present", "Paris", ["Shipped X", "Led Y"]),
            Experience("Engineer", "Beta", "2017 - 2020", bullets=["Built Z"]),
        ],
        education=["MSc CS — MIT", "MSc Data Science — EPFL 2017 - 2019"],
        skills=["Python", "Go"],
        languages=["French — Native", "English"],
        additional=["AWS Certified"],
    )


@pytest.mark.unit
def test_structured_to_hybrid_experience(structured):
    """Test date splitting and the current flag."""
    form = map_structured_to_hybrid(structured)

    first = form.experience[0]
    assert (first.job_title, first.company, first.location) == ("Senior Engineer", "Acme Corp", "Paris")
    assert (first.start_date, first.end_date, first.is_current) == ("2020", "Present", True)
    assert first.achievements == ["Shipped X", "Led Y"]
    assert form.experience[1].is_current is False


@pytest.mark.unit
def test_structured_to_hybrid_education_and_languages(structured):
    """Test splitting education and language lines into fields."""
    form = map_structured_to_hybrid(structured)

    assert (form.education[0].degree, form.education[0].institution) == ("MSc CS", "MIT")
    epfl = form.education[1]
    assert (epfl.degree, epfl.institution, epfl.start_date, epfl.end_date) == (
        "MSc Data Science",
        "EPFL",
        "2017",
        "2019",
    )
    assert form.languages == [HybridLanguage("French", "Native"), HybridLanguage("English", "")]
    assert form.hard_skills == ["Python", "Go"]
    assert form.certifications == ["AWS Certified"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "item, expected",
    [
        (HybridExperience(start_date="2020", is_current=True), "2020 - Present"),
        (HybridExperience(start_date="2018", end_date="2019"), "2018 - 2019"),
        (HybridExperience(start_date="2018"), "2018"),
        (HybridExperience(end_date="2019"), "2019"),
        (HybridExperience(), ""),
    ],
)
def test_format_date_range(item, expected):
    """Test rebuilding the free-text date."""
    assert format_date_range(item) == expected


@pytest.mark.unit
def test_hybrid_to_structured_sorts_and_flattens():
    """Test ordering, bullet cap and list merging."""
    form = HybridCvForm(
        experience=[
            HybridExperience(job_title="Old", start_date="2012", end_date="2014"),
            HybridExperience(job_title="Now", start_date="2021", is_current=True, achievements=list("abcdef")),
        ],
        education=[HybridEducation(degree="MSc", institution="MIT", start_date="2010", end_date="2012")],
        hard_skills=["Python", "Go"],
        soft_skills=["python", "Leadership"],
        languages=[HybridLanguage("French", "Native")],
        certifications=["CKA"],
        interests=["Chess"],
    )

    structured = map_hybrid_to_structured(form)

    assert [item.title for item in structured.experiences] == ["Now", "Old"]
    assert structured.experiences[0].date == "2021 - Present"
    assert structured.experiences[0].bullets == ["a", "b", "c", "d"]
    assert structured.education == ["MSc — MIT — 2010 - 2012"]
    assert structured.skills == ["Python", "Go", "Leadership"]
    assert structured.languages == ["French — Native"]
    assert structured.additional == ["CKA", "Chess"]


@pytest.mark.unit
def test_round_trip_keeps_experience_content(structured):
    """Test that experience content and order survive a round trip."""
    back = map_hybrid_to_structured(map_structured_to_hybrid(structured))

    assert back.contact == structured.contact
    assert [(item.title, item.company, item.bullets) for item in back.experiences] == [
        (item.title, item.company, item.bullets) for item in structured.experiences
    ]
    assert [item.date for item in back.experiences] == ["2020 - Present", "2017 - 2020"]


@pytest.mark.unit
def test_create_empty_hybrid_cv_form():
    """Test the blank editor form has one empty experience row."""
    form = create_empty_hybrid_cv_form()
    assert form.experience == [HybridExperience()]
    assert form.personal_info.full_name == ""
