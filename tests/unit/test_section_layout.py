"""Unit tests for sidebar classification and section reordering."""

import pytest

from cvmiracle.contexts.intake.segmenter import ResumeSection
from cvmiracle.contexts.layout.section_layout import (
    classify_sidebar_headings,
    default_sidebar_headings,
    rebuild_sections_by_original_order,
)


@pytest.mark.unit
def test_default_sidebar_headings():
    """Test the configured sidebar headings."""
    assert default_sidebar_headings() == {"Skills", "Languages", "Certifications", "Interests"}


@pytest.mark.unit
def test_classify_sidebar_by_heading_and_shape():
    """Test that known headings and short-line sections go to the sidebar."""
    sections = [
        ResumeSection("Compétences", ["x" * 80] * 12),
        ResumeSection("Education", ["MSc Data Science — EPFL 2017 - 2019"]),
        ResumeSection("Experience", ["Data Engineer — Acme Corp 2019 - 2023", "- Built pipelines for analytics teams across Europe"]),
        ResumeSection("Summary", ["Engineer with a decade of experience in distributed data systems."]),
        ResumeSection("Volunteer Work", ["a"] * 7),
    ]

    assert classify_sidebar_headings(sections) == {"Skills", "Education"}


@pytest.mark.unit
def test_classify_sidebar_empty():
    """Test that no sections yields no sidebar headings."""
    assert classify_sidebar_headings([]) == set()


@pytest.mark.unit
def test_rebuild_follows_original_headings():
    """Test reordering by the original résumé's headings."""
    original = [ResumeSection("Skills", ["Go"]), ResumeSection("Experience", ["x"])]
    optimized = [ResumeSection("EXPERIENCE", ["y"]), ResumeSection("Compétences", ["Go"])]

    rebuilt = rebuild_sections_by_original_order(original, optimized)

    assert [section.heading for section in rebuilt] == ["Skills", "Experience"]
    assert rebuilt[1].lines == ["y"]


@pytest.mark.unit
def test_rebuild_prefers_metadata_order_and_appends_extras():
    """Test the detected order, extra sections and duplicate headings."""
    original = [ResumeSection("Experience", ["x"])]
    optimized = [
        ResumeSection("Projects", ["p"]),
        ResumeSection("Experience", ["first"]),
        ResumeSection("Summary", ["s"]),
        ResumeSection("Experience", ["second"]),
    ]

    rebuilt = rebuild_sections_by_original_order(original, optimized, ("Summary", "Experience"))

    assert [section.heading for section in rebuilt] == ["Summary", "Experience", "Projects"]
    assert rebuilt[1].lines == ["first"]

