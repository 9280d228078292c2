"""Unit tests for one-page fitting."""

import pytest

from cvmiracle.contexts.intake.segmenter import ResumeSection
from cvmiracle.contexts.layout.page_fit import (
    budget_for_template,
    classify_density,
    estimate_line_units,
    estimate_section_units,
    fit_sections_for_one_page,
    load_page_fit_config,
)


def lines(count):
    return [f"- item {index}" for index in range(count)]


@pytest.fixture
def crowded_sections():
    return [
        ResumeSection("Summary", lines(2)),
        ResumeSection("Experience", lines(30)),
        ResumeSection("Education", lines(4)),
        ResumeSection("Skills", lines(6)),
        ResumeSection("Languages", lines(3)),
        ResumeSection("Interests", lines(3)),
        ResumeSection("Certifications", lines(3)),
    ]


def line_counts(result):
    return {section.heading: len(section.lines) for section in result.sections}


@pytest.mark.unit
def test_estimate_line_units():
    """Test unit cost per started block of characters."""
    assert estimate_line_units("- short") == 1
    assert estimate_line_units("") == 1
    assert estimate_line_units("x" * 96) == 1
    assert estimate_line_units("x" * 97) == 2
    assert estimate_line_units("• " + "x" * 96) == 1


@pytest.mark.unit
def test_estimate_section_units():
    """Test heading cost plus line units."""
    assert estimate_section_units(ResumeSection("Skills", ["a", "x" * 200])) == 1.5 + 1 + 3


@pytest.mark.unit
def test_budgets_per_template():
    """Test configured budgets and the default."""
    config = load_page_fit_config()
    assert budget_for_template("Minimal ATS", config) == 98
    assert budget_for_template("Modern Sidebar", config) == 93
    assert budget_for_template("Executive Classic", config) == 95
    assert budget_for_template(None, config) == 95


@pytest.mark.unit
@pytest.mark.parametrize("units, expected", [(90, "tight"), (80, "normal"), (50, "relaxed"), (95 * 0.93, "normal")])
def test_classify_density(units, expected):
    """Test density thresholds relative to the budget."""
    assert classify_density(units, 95, {"tight": 0.93, "normal": 0.82}) == expected


@pytest.mark.unit
def test_fit_trims_lowest_priority_first(crowded_sections):
    """Test priority trimming down to minimums, then Experience (scenario F)."""
    result = fit_sections_for_one_page(crowded_sections, config={"budgets": {"default": 30}})

    assert line_counts(result) == {
        "Summary": 2,
        "Experience": 9,
        "Education": 2,
        "Skills": 3,
        "Languages": 1,
        "Interests": 1,
        "Certifications": 1,
    }
    assert result.units == 29.5
    assert result.units <= result.budget == 30
    assert result.removed_lines == 16
    assert result.density_class == "tight"


@pytest.mark.unit
def test_fit_stops_once_under_budget(crowded_sections):
    """Test that higher-priority sections are untouched when not needed."""
    result = fit_sections_for_one_page(crowded_sections, config={"budgets": {"default": 40}})

    counts = line_counts(result)
    assert (counts["Interests"], counts["Languages"], counts["Certifications"]) == (1, 1, 1)
    assert (counts["Skills"], counts["Experience"]) == (6, 14)
    assert result.units == 39.5
    assert result.removed_lines == 6


@pytest.mark.unit
def test_fit_never_goes_below_minimums(crowded_sections):
    """Test that an impossible budget leaves every section at its floor."""
    result = fit_sections_for_one_page(crowded_sections, config={"budgets": {"default": 1}})

    assert line_counts(result)["Experience"] == 6
    assert line_counts(result)["Skills"] == 3
    assert result.units > result.budget
    assert result.density_class == "tight"


@pytest.mark.unit
def test_fit_applies_caps_and_truncation():
    """Test per-heading caps, default caps and long-line truncation."""
    sections = [
        ResumeSection("SKILLS", ["Python"] * 20),
        ResumeSection("Volunteer Work", lines(10)),
        ResumeSection("Summary", ["x" * 300, "short"]),
    ]

    result = fit_sections_for_one_page(sections)

    counts = line_counts(result)
    assert counts == {"Skills": 10, "Volunteer Work": 7, "Summary": 2}
    long_line = result.sections[2].lines[0]
    assert len(long_line) == 170
    assert long_line.endswith("…")
    assert result.removed_lines == 0
    assert result.density_class == "relaxed"


@pytest.mark.unit
def test_fit_does_not_mutate_input(crowded_sections):
    """Test that input sections are left untouched."""
    fit_sections_for_one_page(crowded_sections, config={"budgets": {"default": 30}})
    assert len(crowded_sections[1].lines) == 30


@pytest.mark.unit
def test_page_fit_config_path(monkeypatch, tmp_path):
    """Test overrides from the PAGE_FIT_CONFIG_PATH file."""
    override = tmp_path / "page_fit.yaml"
    override.write_text("budgets:\n  default: 50\n", encoding="utf-8")
    monkeypatch.setenv("PAGE_FIT_CONFIG_PATH", str(override))

    config = load_page_fit_config()

    assert config["budgets"]["default"] == 50
    assert config["budgets"]["Minimal ATS"] == 98
