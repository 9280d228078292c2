"""
Integration tests for the command-line interface.
"""

import json

import pytest
from loguru import logger
from typer.testing import CliRunner

from cvmiracle import cli
from cvmiracle.cli import app
from cvmiracle.contexts.structuring.ai_extraction import ResumeOptimization
from cvmiracle.contexts.structuring.data_structures import StructuredCv
from cvmiracle.utils.result import Result

runner = CliRunner()

JOB_OFFER = (
    "Senior Data Engineer. We are looking for an engineer to build and operate batch and streaming "
    "pipelines with Python, Airflow and dbt for our analytics teams across Europe."
)

COMPLETE_CV = {
    "contact": {"full_name": "John Doe", "email": "john@doe.com", "phone": "0612345678"},
    "experiences": [
        {"title": "Engineer", "company": "Acme", "date": "2020 - Present", "location": "Paris", "bullets": ["Built X"]}
    ],
}


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
    cli._layout_cache.clear()


@pytest.fixture
def resume_file(tmp_path, scenario_a_text):
    path = tmp_path / "resume.txt"
    path.write_text(scenario_a_text, encoding="utf-8")
    return path


@pytest.fixture
def two_column_file(tmp_path, two_column_text):
    path = tmp_path / "two_column.txt"
    path.write_text(two_column_text, encoding="utf-8")
    return path


@pytest.fixture
def job_file(tmp_path):
    path = tmp_path / "job.txt"
    path.write_text(JOB_OFFER, encoding="utf-8")
    return path


def write_json(tmp_path, payload):
    path = tmp_path / "cv.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.mark.integration
def test_no_command_shows_help():
    """Test that running without a command prints help."""
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    for command in ("structure", "layout", "fit", "render", "optimize", "validate"):
        assert command in result.output


@pytest.mark.integration
def test_structure_command(resume_file):
    """Test the heuristic structure preview as JSON."""
    result = runner.invoke(app, ["structure", str(resume_file)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["source"] == "heuristic"
    assert data["structured_cv"]["experiences"][0]["company"] == "Acme Corp"
    assert data["hybrid_form"]["experience"][0]["is_current"] is True


@pytest.mark.integration
def test_structure_command_with_ai(monkeypatch, resume_file):
    """Test the --ai path with stubbed LLM calls."""
    monkeypatch.setattr(
        cli, "extract_structured_cv_with_llm", lambda cv_text, job_text: Result.success(StructuredCv(summary="From AI"))
    )
    monkeypatch.setattr(cli, "extract_experience_summaries_with_llm", lambda structured: Result.success(["Led X."]))

    result = runner.invoke(app, ["structure", str(resume_file), "--ai"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["source"] == "hybrid-summaries"
    assert data["structured_cv"]["summary"] == "From AI"


@pytest.mark.integration
def test_layout_command(two_column_file):
    """Test layout metadata, variant and style as JSON."""
    result = runner.invoke(app, ["layout", str(two_column_file)])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["metadata"]["layout_type"] == "two-column-left"
    assert data["variant"] == "template_two_column_left_v2"
    assert data["style"]["sidebar_ratio"] == 0.31


@pytest.mark.integration
def test_fit_command_uses_template_budget(resume_file):
    """Test the fit command with a template budget."""
    result = runner.invoke(app, ["fit", str(resume_file), "--template", "Minimal ATS"])

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["budget"] == 98
    assert data["density_class"] == "relaxed"
    assert "Experience" in [section["heading"] for section in data["sections"]]


@pytest.mark.integration
def test_render_command_writes_file(resume_file, tmp_path):
    """Test rendering to an output file with a detected title."""
    output = tmp_path / "out" / "resume.html"

    result = runner.invoke(app, ["render", str(resume_file), "-o", str(output), "-k", "Python", "--match-score", "75"])

    assert result.exit_code == 0
    html = output.read_text(encoding="utf-8")
    assert '<h1 class="cv-name">John Doe</h1>' in html
    assert "Match score: 75%" in html
    assert "Keywords: Python" in html


@pytest.mark.integration
def test_render_command_to_stdout(two_column_file):
    """Test rendering to stdout."""
    result = runner.invoke(app, ["render", str(two_column_file), "--title", "Jane Doe"])

    assert result.exit_code == 0
    assert result.stdout.lstrip().startswith("<!doctype html>")
    assert 'class="cv-content two-col"' in result.stdout


@pytest.mark.integration
def test_render_rejects_out_of_range_score(resume_file):
    """Test option validation on the match score."""
    result = runner.invoke(app, ["render", str(resume_file), "--match-score", "120"])
    assert result.exit_code != 0


@pytest.mark.integration
def test_optimize_command(monkeypatch, resume_file, job_file, tmp_path):
    """Test optimization with a stubbed LLM call."""
    optimization = ResumeOptimization(
        optimized_resume=resume_file.read_text(encoding="utf-8"),
        match_score=81,
        keywords_integrated=["Python"],
        missing_skills=["Airflow"],
    )
    monkeypatch.setattr(cli, "optimize_resume_with_llm", lambda cv_text, job_text: Result.success(optimization))
    output = tmp_path / "optimized.html"

    result = runner.invoke(app, ["optimize", str(resume_file), str(job_file), "-o", str(output)])

    assert result.exit_code == 0
    html = output.read_text(encoding="utf-8")
    assert '<h1 class="cv-name">Senior Data Engineer</h1>' in html
    assert "Match score: 81%" in html
    assert "Missing skills: Airflow" in result.output


@pytest.mark.integration
def test_optimize_command_short_job_offer(resume_file, tmp_path):
    """Test that a too-short job offer is rejected before any LLM call."""
    short_job = tmp_path / "short.txt"
    short_job.write_text("Engineer wanted.", encoding="utf-8")

    result = runner.invoke(app, ["optimize", str(resume_file), str(short_job)])

    assert result.exit_code == 1
    assert "insuffisant" in result.output


@pytest.mark.integration
def test_optimize_command_llm_failure(monkeypatch, resume_file, job_file):
    """Test that an LLM failure exits with an error."""
    monkeypatch.setattr(cli, "optimize_resume_with_llm", lambda cv_text, job_text: Result.failure("no integrated keywords"))

    result = runner.invoke(app, ["optimize", str(resume_file), str(job_file)])

    assert result.exit_code == 1
    assert "no integrated keywords" in result.output


@pytest.mark.integration
def test_validate_complete_cv(tmp_path):
    """Test a résumé that respects the golden rule."""
    result = runner.invoke(app, ["validate", str(write_json(tmp_path, COMPLETE_CV))])

    assert result.exit_code == 0
    assert "Confidence:" in result.output
    assert "Golden rule respected" in result.output


@pytest.mark.integration
def test_validate_missing_location(tmp_path):
    """Test that a blocking issue exits with code 1 (scenario C)."""
    payload = json.loads(json.dumps(COMPLETE_CV))
    del payload["experiences"][0]["location"]

    result = runner.invoke(app, ["validate", str(write_json(tmp_path, payload))])

    assert result.exit_code == 1
    assert "Expérience 1: Lieu manquant." in result.output
    assert "Golden rule non respectée" in result.output


@pytest.mark.integration
def test_validate_hybrid_form(tmp_path):
    """Test that hybrid-form JSON is validated as such."""
    payload = {"personalInfo": {"fullName": "John Doe"}, "experience": []}

    result = runner.invoke(app, ["validate", str(write_json(tmp_path, payload))])

    assert result.exit_code == 1
    assert "Email manquant." in result.output
    assert "Ajoute au moins une expérience." in result.output


@pytest.mark.integration
def test_validate_invalid_json(tmp_path):
    """Test unreadable JSON input."""
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    result = runner.invoke(app, ["validate", str(path)])

    assert result.exit_code == 1
    assert "Cannot read" in result.output
