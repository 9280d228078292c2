"""Unit tests for job offer and résumé text preparation."""

import pytest

from cvmiracle.contexts.intake.exceptions import InvalidJobOfferError
from cvmiracle.contexts.intake.job_offer import (
    MAX_INPUT_CHARS,
    clean_job_offer_text,
    infer_application_title,
    prepare_resume_text,
)


@pytest.mark.unit
def test_clean_job_offer_collapses_and_caps():
    """Test whitespace collapse and the 20,000 character cap."""
    text = "Data   Engineer\n\n" + "x " * 15000
    clean = clean_job_offer_text(text)
    assert clean.startswith("Data Engineer x")
    assert len(clean) == MAX_INPUT_CHARS


@pytest.mark.unit
def test_short_job_offer_rejected():
    """Test that offers under 120 characters raise."""
    with pytest.raises(InvalidJobOfferError) as excinfo:
        clean_job_offer_text("Too short")
    assert excinfo.value.length == 9
    assert excinfo.value.minimum == 120


@pytest.mark.unit
def test_prepare_resume_text_keeps_lines():
    """Test CRLF normalization without collapsing line breaks."""
    assert prepare_resume_text("a\r\nb\rc") == "a\nb\nc"


@pytest.mark.unit
def test_infer_application_title():
    """Test first-sentence titles and the default."""
    assert infer_application_title("Senior Data Engineer. Join us.") == "Senior Data Engineer"
    assert infer_application_title("   ") == "Application optimisée"
