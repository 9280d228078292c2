"""
Command-line interface for the résumé pipeline.

Commands:
    structure - Parse résumé text into the structure preview (JSON)
    layout    - Detect layout metadata, template variant and style (JSON)
    fit       - Fit résumé sections to one page (JSON)
    render    - Render résumé text to one-page HTML
    optimize  - Tailor a résumé to a job offer with the LLM, then render it
    validate  - Check a structured or hybrid résumé (JSON) against the golden rule
"""

import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from loguru import logger

from cvmiracle.contexts.intake.exceptions import InvalidJobOfferError
from cvmiracle.contexts.intake.job_offer import clean_job_offer_text, infer_application_title, prepare_resume_text
from cvmiracle.contexts.intake.normalizer import STRUCTURE_PROFILE
from cvmiracle.contexts.intake.segmenter import parse_sections
from cvmiracle.contexts.layout.cache import LayoutMetadataCache
from cvmiracle.contexts.layout.layout_detector import detect_layout_metadata
from cvmiracle.contexts.layout.logger import setup_layout_logger
from cvmiracle.contexts.layout.page_fit import fit_sections_for_one_page
from cvmiracle.contexts.layout.style_config import resolve_style_config
from cvmiracle.contexts.layout.template_mapper import (
    DEFAULT_TEMPLATE_CHOICE,
    map_layout_to_template,
    normalize_template_choice,
)
from cvmiracle.contexts.rendering.exceptions import TemplateRenderError
from cvmiracle.contexts.rendering.html_renderer import BuildArgs, build_intelligent_resume_html
from cvmiracle.contexts.rendering.logger import setup_rendering_logger
from cvmiracle.contexts.structuring.ai_extraction import (
    extract_experience_summaries_with_llm,
    extract_structured_cv_with_llm,
    optimize_resume_with_llm,
)
from cvmiracle.contexts.structuring.logger import setup_structuring_logger
from cvmiracle.contexts.structuring.preview import build_structure_preview
from cvmiracle.contexts.structuring.sanitizer import sanitize_structured_cv
from cvmiracle.contexts.structuring.validation import (
    compute_hybrid_confidence,
    get_hybrid_validation_issues,
    golden_rule_message,
)

load_dotenv()

app = typer.Typer(
    add_completion=False,
    help="Structure résumés and fit them to a one-page layout",
    invoke_without_command=True,
)

# Shared across commands of one process
_layout_cache: LayoutMetadataCache = LayoutMetadataCache()


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    # Console shows warnings only; --log-dir on a command adds a full log file
    logger.remove()
    logger.add(sys.stderr, level="WARNING", format="{level: <7} | {message}")

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _read_text(path: Path) -> str:
    try:
        return prepare_resume_text(path.read_text(encoding="utf-8"))
    except OSError as e:
        typer.secho(f"ERROR: Cannot read {path}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _echo_json(payload) -> None:
    typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))


def _write_html(html: str, output: Optional[Path]) -> None:
    if output is None:
        typer.echo(html)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN, err=True)


TEMPLATE_OPTION = typer.Option(DEFAULT_TEMPLATE_CHOICE, "--template", "-t", help="Template choice")
LOG_DIR_OPTION = typer.Option(None, "--log-dir", help="Write a DEBUG log file to this directory")


@app.command("structure")
def structure_command(
    resume_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Résumé text file"),
    ai: bool = typer.Option(False, "--ai", help="Merge an LLM extraction and experience summaries"),
    job_file: Optional[Path] = typer.Option(None, "--job", exists=True, dir_okay=False, help="Job offer text file"),
    log_dir: Optional[Path] = LOG_DIR_OPTION,
):
    """
    Parse a résumé into the structure preview.

    Examples:\n

        $ cvmiracle structure resume.txt

        $ cvmiracle structure resume.txt --ai --job offer.txt
    """
    if log_dir:
        setup_structuring_logger(log_dir, inputs=[path for path in (resume_file, job_file) if path])

    cv_text = _read_text(resume_file)
    ai_structured = None
    summaries = None

    if ai:
        job_text = job_file.read_text(encoding="utf-8") if job_file else ""
        ai_structured = extract_structured_cv_with_llm(cv_text, job_text)
        if ai_structured.ok:
            summaries = extract_experience_summaries_with_llm(ai_structured.value)

    preview = build_structure_preview(cv_text, ai_structured=ai_structured, experience_summaries=summaries)
    _echo_json(preview.to_dict())


@app.command("layout")
def layout_command(
    resume_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Original résumé text file"),
    template: str = TEMPLATE_OPTION,
    log_dir: Optional[Path] = LOG_DIR_OPTION,
):
    """Detect layout metadata and show the chosen variant and style."""
    if log_dir:
        setup_layout_logger(log_dir, template, inputs=[resume_file])

    metadata = detect_layout_metadata(_read_text(resume_file), template, cache=_layout_cache)
    variant = map_layout_to_template(metadata)
    _echo_json(
        {
            "metadata": metadata.to_dict(),
            "variant": variant,
            "style": resolve_style_config(metadata, variant).to_dict(),
        }
    )


@app.command("fit")
def fit_command(
    resume_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Résumé text file"),
    template: str = TEMPLATE_OPTION,
    log_dir: Optional[Path] = LOG_DIR_OPTION,
):
    """Fit résumé sections to the one-page budget of a template."""
    if log_dir:
        setup_layout_logger(log_dir, template, inputs=[resume_file])

    sections = parse_sections(_read_text(resume_file), STRUCTURE_PROFILE)
    result = fit_sections_for_one_page(sections, normalize_template_choice(template))
    _echo_json(result.to_dict())


@app.command("render")
def render_command(
    resume_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Original résumé text file"),
    optimized_file: Optional[Path] = typer.Option(
        None, "--optimized", exists=True, dir_okay=False, help="Rewritten résumé (defaults to the original)"
    ),
    template: str = TEMPLATE_OPTION,
    title: Optional[str] = typer.Option(None, "--title", help="Header title (defaults to the detected name)"),
    match_score: Optional[int] = typer.Option(None, "--match-score", min=0, max=100),
    keywords: Optional[List[str]] = typer.Option(None, "--keyword", "-k", help="Keyword shown in the header"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="HTML file (stdout when omitted)"),
    log_dir: Optional[Path] = LOG_DIR_OPTION,
):
    """
    Render a résumé to one-page HTML in the layout of the original.

    Examples:\n

        $ cvmiracle render resume.txt -o out/resume.html

        $ cvmiracle render resume.txt --optimized rewritten.txt -t "Minimal ATS" -k Python -k SQL
    """
    if log_dir:
        setup_rendering_logger(log_dir, template, inputs=[path for path in (resume_file, optimized_file) if path])

    original = _read_text(resume_file)
    optimized = _read_text(optimized_file) if optimized_file else original
    if title is None:
        title = build_structure_preview(original).structured_cv.contact.full_name

    args = BuildArgs(
        title=title,
        original_resume_text=original,
        optimized_resume_text=optimized,
        template_choice=normalize_template_choice(template),
        match_score=match_score,
        keywords=tuple(keywords or ()),
    )
    try:
        result = build_intelligent_resume_html(args, cache=_layout_cache)
    except TemplateRenderError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    _write_html(result.html, output)


@app.command("optimize")
def optimize_command(
    resume_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Résumé text file"),
    job_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Job offer text file"),
    template: str = TEMPLATE_OPTION,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="HTML file (stdout when omitted)"),
    log_dir: Optional[Path] = LOG_DIR_OPTION,
):
    """Tailor a résumé to a job offer with the LLM and render the result."""
    if log_dir:
        setup_rendering_logger(log_dir, template, inputs=[resume_file, job_file])

    cv_text = _read_text(resume_file)
    try:
        job_text = clean_job_offer_text(job_file.read_text(encoding="utf-8"))
    except InvalidJobOfferError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    optimization = optimize_resume_with_llm(cv_text, job_text)
    if not optimization.ok:
        typer.secho(f"ERROR: {optimization.error}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    value = optimization.value
    args = BuildArgs(
        title=infer_application_title(job_text),
        original_resume_text=cv_text,
        optimized_resume_text=value.optimized_resume,
        template_choice=normalize_template_choice(template),
        match_score=value.match_score,
        keywords=tuple(value.keywords_integrated),
    )
    try:
        result = build_intelligent_resume_html(args, cache=_layout_cache)
    except TemplateRenderError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    _write_html(result.html, output)
    typer.secho(f"Match score: {value.match_score}%", fg=typer.colors.BLUE, err=True)
    if value.missing_skills:
        typer.echo(f"Missing skills: {', '.join(value.missing_skills)}", err=True)


@app.command("validate")
def validate_command(
    cv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="Structured or hybrid résumé (JSON)"),
):
    """
    Check a résumé against the golden rule and score its completeness.

    Exits with code 1 when a blocking issue is found.
    """
    try:
        data = json.loads(cv_file.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        typer.secho(f"ERROR: Cannot read {cv_file}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    # StructuredCv JSON carries "contact" and "experiences"; anything else is read as a hybrid form
    cv = sanitize_structured_cv(data) if isinstance(data, dict) and ("contact" in data or "experiences" in data) else data

    issues = get_hybrid_validation_issues(cv)
    scores = compute_hybrid_confidence(cv).to_dict()

    typer.echo(f"Confidence: {scores.pop('global')}/100")
    for category, score in scores.items():
        typer.echo(f"  {category}: {score}")

    message = golden_rule_message(issues)
    if message is None:
        typer.secho("✓ Golden rule respected", fg=typer.colors.GREEN)
        return

    typer.echo(f"\n=== Issues ({len(issues)}) ===")
    for issue in issues:
        typer.echo(f"  ! {issue}")
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
