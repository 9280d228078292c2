"""Unit tests for text normalization, heading detection and segmentation."""

import pytest

from cvmiracle.contexts.intake.normalizer import (
    RENDER_PROFILE,
    STRUCTURE_PROFILE,
    clean_line,
    looks_heading,
    normalize_heading,
    normalize_unicode,
    split_lines,
)
from cvmiracle.contexts.intake.segmenter import lines_for, parse_sections


@pytest.mark.unit
@pytest.mark.parametrize("heading", ["Compétences", "Skills", "SKILLS:", "## Skills", "**Compétences techniques**"])
def test_skill_headings_canonicalize_to_skills(heading):
    """Test that English, French and decorated variants map to the same heading."""
    assert normalize_heading(heading) == "Skills"


@pytest.mark.unit
def test_unknown_heading_passes_through():
    """Test that custom headings survive with only the trailing colon removed."""
    assert normalize_heading("Volunteer Work:") == "Volunteer Work"


@pytest.mark.unit
def test_normalize_unicode_replaces_invisible_characters():
    """Test NBSP, zero-width and curly quote replacement."""
    assert normalize_unicode("Jean\u00a0Dupont\u200b l\u2019équipe") == "Jean Dupont l'équipe"


@pytest.mark.unit
def test_split_lines_strips_markdown_and_keeps_bullets():
    """Test that markdown decoration goes and bullet glyphs stay."""
    lines = split_lines("# **Experience**\n\n- Shipped `X`\n   \n")
    assert lines == ["Experience", "- Shipped X"]


@pytest.mark.unit
def test_clean_line_removes_bullet_and_markdown():
    """Test combined bullet and emphasis removal."""
    assert clean_line("• **Led** Y") == "Led Y"


@pytest.mark.unit
@pytest.mark.parametrize(
    "line, expected",
    [
        ("Experience", True),
        ("EXPÉRIENCE PROFESSIONNELLE", True),
        ("Volunteer Work", True),
        ("- Skills", False),
        ("Senior Engineer — Acme Corp", False),
        ("I shipped many things.", False),
        ("john@doe.com", False),
        ("lowercase start", False),
        ("Five Capitalized Words Are Too", False),
    ],
)
def test_looks_heading(line, expected):
    """Test heading detection on typical résumé lines."""
    assert looks_heading(line) is expected


@pytest.mark.unit
def test_render_profile_is_stricter_on_heading_length():
    """Test that a 50-character heading only passes the structuring profile."""
    heading = "Internationally Recognized Leadership Achievements"
    assert looks_heading(heading, STRUCTURE_PROFILE) is True
    assert looks_heading(heading, RENDER_PROFILE) is False


@pytest.mark.unit
def test_parse_sections_puts_leading_text_in_summary():
    """Test that content before the first heading lands in an implicit Summary."""
    sections = parse_sections("Data engineer with ten years of experience.\nSkills\nPython, Go")
    assert [section.heading for section in sections] == ["Summary", "Skills"]
    assert sections[1].lines == ["Python, Go"]


@pytest.mark.unit
def test_parse_sections_drops_empty_sections():
    """Test that a heading with no lines produces no section."""
    sections = parse_sections("Skills\nEducation\nMSc CS — MIT")
    assert [section.heading for section in sections] == ["Education"]


@pytest.mark.unit
def test_lines_for_concatenates_matching_sections():
    """Test line collection across several headings in document order."""
    sections = parse_sections("Education\nMSc — MIT\nProjects\nCompiler — 2021\nSkills\nGo, Rust")
    assert lines_for(sections, "Education", "Projects") == ["MSc — MIT", "Compiler — 2021"]
