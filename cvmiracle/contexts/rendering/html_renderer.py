"""
HTML rendering for one-page résumés.

build_intelligent_resume_html() runs the whole layout chain on a rewritten
résumé:

1. Detect layout metadata from the ORIGINAL text
2. Map it to a template variant and resolve style parameters
3. Parse both texts into sections and order the rewrite like the original
4. Fit the sections to the one-page budget
5. Split sidebar sections off for two-column variants
6. Render resume.html.jinja

Rendering is a pure function of its inputs; the only shared state is the
optional layout cache passed through to detection.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from jinja2 import TemplateError

from cvmiracle.contexts.intake.contact_extractor import extract_contact
from cvmiracle.contexts.intake.experience_parser import split_segments
from cvmiracle.contexts.intake.line_classifier import strip_date
from cvmiracle.contexts.intake.normalizer import RENDER_PROFILE, is_bullet, normalize_heading, split_lines, strip_bullet
from cvmiracle.contexts.intake.segmenter import ResumeSection, parse_sections
from cvmiracle.contexts.layout.cache import LayoutMetadataCache
from cvmiracle.contexts.layout.layout_detector import LayoutMetadata, detect_layout_metadata
from cvmiracle.contexts.layout.page_fit import FitResult, fit_sections_for_one_page
from cvmiracle.contexts.layout.section_layout import (
    classify_sidebar_headings,
    default_sidebar_headings,
    rebuild_sections_by_original_order,
)
from cvmiracle.contexts.layout.style_config import (
    StyleConfig,
    column_fractions,
    resolve_style_config,
    section_gap_for_rhythm,
)
from cvmiracle.contexts.layout.template_mapper import map_layout_to_template, normalize_template_choice
from cvmiracle.contexts.rendering.exceptions import TemplateRenderError
from cvmiracle.contexts.rendering.logger import log_render_result
from cvmiracle.contexts.rendering.registries import TemplateRegistry
from cvmiracle.contexts.structuring.data_structures import StructuredCv

RESUME_TEMPLATE = "resume"
MAX_RENDERED_BULLETS = 4
MAX_KEYWORDS = 10
KEYWORD_JOINER = " · "
DEFAULT_TITLE = "Curriculum Vitae"


@dataclass(frozen=True)
class RenderPatterns:
    """Regex patterns for laying out individual lines."""

    # A line ending in a year range becomes a two-cell row
    DATED_LINE: re.Pattern = re.compile(
        r"(.+?)\s+(\d{4}\s*[-–]\s*(?:\d{4}|Present|Current|Aujourd'hui))$", re.IGNORECASE
    )


@dataclass
class BuildArgs:
    """
    Inputs of build_intelligent_resume_html().

    Attributes:
        title: Name shown in the page header
        original_resume_text: Text the layout is inferred from
        optimized_resume_text: Text whose content is rendered
        template_choice: Requested template name (legacy names accepted)
        match_score: Optional job-match score shown in the header
        keywords: Keywords shown in the header (first ten)
    """

    title: str
    original_resume_text: str
    optimized_resume_text: str
    template_choice: str
    match_score: Optional[int] = None
    keywords: Sequence[str] = field(default_factory=tuple)


@dataclass
class BuildResult:
    html: str
    metadata: LayoutMetadata
    variant: str
    style: StyleConfig
    fit: FitResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "html": self.html,
            "metadata": self.metadata.to_dict(),
            "variant": self.variant,
            "style": self.style.to_dict(),
            "fit": self.fit.to_dict(),
        }


_registry: Optional[TemplateRegistry] = None


def get_registry() -> TemplateRegistry:
    global _registry
    if _registry is None:
        _registry = TemplateRegistry()
    return _registry


# =============================================================================
# LINE LAYOUT
# =============================================================================


def apply_heading_case(heading: str, capitalization: str) -> str:
    """
    Re-case a heading the way the original résumé cased its headings.

    Example:
        >>> apply_heading_case("Work experience", "uppercase")
        'WORK EXPERIENCE'
        >>> apply_heading_case("work experience", "titlecase")
        'Work Experience'
    """
    if capitalization == "uppercase":
        return heading.upper()
    if capitalization == "titlecase":
        return " ".join(word[:1].upper() + word[1:].lower() for word in heading.split(" "))
    return heading


def split_dated_line(line: str) -> Tuple[str, str]:
    """
    Split a trailing year range off a line.

    Returns:
        (text, date), with date empty when the line has no trailing range

    Example:
        >>> split_dated_line("MSc Computer Science, EPFL 2016 - 2018")
        ('MSc Computer Science, EPFL', '2016 - 2018')
    """
    match = RenderPatterns.DATED_LINE.match(line.strip())
    if not match:
        return line.strip(), ""
    return match.group(1).strip(), match.group(2).strip()


def parse_experience_blocks(lines: Sequence[str]) -> List[Dict[str, Any]]:
    """
    Group experience lines into entries for display.

    Every non-bullet line opens an entry; its date is removed and the rest
    split into company and role. Bullets attach to the open entry, or open
    one when they come first. At most four bullets per entry are shown.

    Example:
        >>> blocks = parse_experience_blocks(["Acme — Engineer 2020 - 2022", "• Built X"])
        >>> blocks[0]["company"], blocks[0]["role"], blocks[0]["date"], blocks[0]["bullets"]
        ('Acme', 'Engineer', '2020 - 2022', ['Built X'])
    """
    entries: List[Dict[str, Any]] = []
    current = None

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        if not is_bullet(line):
            if current:
                entries.append(current)
            date, remainder = strip_date(line)
            segments = split_segments(remainder) or [remainder]
            current = {
                "company": segments[0] or line,
                "role": segments[1] if len(segments) > 1 else "",
                "date": date,
                "bullets": [],
            }
            continue

        if current is None:
            current = {"company": strip_bullet(line), "role": "", "date": "", "bullets": []}
            continue
        current["bullets"].append(strip_bullet(line))

    if current:
        entries.append(current)

    for entry in entries:
        entry["bullets"] = entry["bullets"][:MAX_RENDERED_BULLETS]
    return entries


def _section_view(section: ResumeSection, capitalization: str) -> Dict[str, Any]:
    title = apply_heading_case(section.heading, capitalization)
    if section.heading == "Experience":
        return {"title": title, "entries": parse_experience_blocks(section.lines), "rows": []}

    rows = []
    for line in section.lines:
        text, date = split_dated_line(strip_bullet(line))
        rows.append({"text": text, "date": date})
    return {"title": title, "entries": None, "rows": rows}


# =============================================================================
# PAGE ASSEMBLY
# =============================================================================


def _contact_items(original_text: str) -> List[str]:
    contact = extract_contact(split_lines(original_text)).contact
    return [value for value in (contact.email, contact.phone, contact.website, contact.location) if value]


def split_sidebar_sections(
    sections: Sequence[ResumeSection], original_sections: Sequence[ResumeSection]
) -> Tuple[List[ResumeSection], List[ResumeSection]]:
    """
    Partition sections into (main, sidebar).

    Sidebar membership is judged on the original résumé; when nothing there
    qualifies, the default sidebar headings apply.
    """
    sidebar = classify_sidebar_headings(original_sections) or default_sidebar_headings()
    main = [section for section in sections if normalize_heading(section.heading) not in sidebar]
    side = [section for section in sections if normalize_heading(section.heading) in sidebar]
    return main, side


def _template_context(
    args: BuildArgs,
    metadata: LayoutMetadata,
    variant: str,
    style: StyleConfig,
    fit: FitResult,
    original_sections: Sequence[ResumeSection],
) -> Dict[str, Any]:
    capitalization = metadata.heading_capitalization
    main, side = split_sidebar_sections(fit.sections, original_sections)
    two_columns = metadata.column_count == 2 and bool(side)

    return {
        "title": args.title or DEFAULT_TITLE,
        "contact_items": _contact_items(args.original_resume_text),
        "template_choice": args.template_choice,
        "layout_type": metadata.layout_type,
        "match_score": "N/A" if args.match_score is None else args.match_score,
        "keywords": KEYWORD_JOINER.join(list(args.keywords or ())[:MAX_KEYWORDS]),
        "variant": variant,
        "density_class": fit.density_class,
        "style": style.to_dict(),
        "section_gap": section_gap_for_rhythm(style, metadata.spacing_rhythm),
        "grid_columns": column_fractions(style, metadata.sidebar_position),
        "two_columns": two_columns,
        "sidebar_first": metadata.sidebar_position == "left",
        "sections": [_section_view(section, capitalization) for section in fit.sections],
        "main_sections": [_section_view(section, capitalization) for section in main],
        "side_sections": [_section_view(section, capitalization) for section in side],
    }


def render_template(context: Dict[str, Any], registry: Optional[TemplateRegistry] = None) -> str:
    """
    Render the résumé template.

    Raises:
        TemplateRenderError: If the template is missing or fails to render
    """
    registry = registry or get_registry()
    try:
        template = registry.get_template(RESUME_TEMPLATE)
        return template.render(**context)
    except TemplateError as e:
        raise TemplateRenderError(
            f"Failed to render template '{RESUME_TEMPLATE}'",
            template_name=RESUME_TEMPLATE,
            template_path=registry.get_template_path(RESUME_TEMPLATE),
            variant=context.get("variant"),
            original_error=e,
        ) from e


def build_intelligent_resume_html(
    args: BuildArgs,
    cache: Optional[LayoutMetadataCache] = None,
    registry: Optional[TemplateRegistry] = None,
) -> BuildResult:
    """
    Render a rewritten résumé in the layout of the original.

    Args:
        args: Texts, template choice and header extras
        cache: Optional layout metadata cache shared across calls
        registry: Template registry (module default when omitted)

    Returns:
        BuildResult with HTML, metadata, variant, style and fit outcome

    Raises:
        TemplateRenderError: If the template fails to render

    Example:
        >>> args = BuildArgs("Jane Doe", "Skills\\nPython", "Skills\\nPython, Go", "Minimal ATS")
        >>> result = build_intelligent_resume_html(args)
        >>> result.variant, "Python, Go" in result.html
        ('template_minimal_compact', True)
    """
    metadata = detect_layout_metadata(args.original_resume_text, args.template_choice, cache=cache)
    variant = map_layout_to_template(metadata)
    style = resolve_style_config(metadata, variant)

    original_sections = parse_sections(args.original_resume_text, RENDER_PROFILE)
    optimized_sections = parse_sections(args.optimized_resume_text, RENDER_PROFILE)
    ordered = rebuild_sections_by_original_order(original_sections, optimized_sections, metadata.section_order)
    fit = fit_sections_for_one_page(ordered, normalize_template_choice(args.template_choice))

    context = _template_context(args, metadata, variant, style, fit, original_sections)
    html = render_template(context, registry)

    result = BuildResult(html=html, metadata=metadata, variant=variant, style=style, fit=fit)
    log_render_result(result)
    return result


# =============================================================================
# STRUCTURED CV
# =============================================================================


def structured_cv_to_text(cv: StructuredCv) -> str:
    """
    Write a StructuredCv back out as sectioned résumé text.

    Experience headers are "company — title — location date" so the renderer
    reads company and role back in that order. Every other line is bulleted
    so short items are never mistaken for headings.

    Example:
        >>> from cvmiracle.contexts.structuring.data_structures import Experience
        >>> cv = StructuredCv(experiences=[Experience("Engineer", "Acme", "2020 - 2022", bullets=["Built X"])])
        >>> print(structured_cv_to_text(cv))
        Experience
        Acme — Engineer 2020 - 2022
        • Built X
    """
    blocks: List[List[str]] = []

    if cv.summary:
        blocks.append(["Summary", f"• {cv.summary}"])

    if cv.experiences:
        lines = ["Experience"]
        for experience in cv.experiences:
            parts = [part for part in (experience.company, experience.title, experience.location) if part]
            header = " — ".join(parts)
            lines.append(f"{header} {experience.date}".strip())
            lines.extend(f"• {bullet}" for bullet in experience.bullets)
        blocks.append(lines)

    for heading, values in (
        ("Education", cv.education),
        ("Skills", cv.skills),
        ("Languages", cv.languages),
        ("Additional", cv.additional),
    ):
        if values:
            blocks.append([heading, *(f"• {value}" for value in values)])

    return "\n\n".join("\n".join(block) for block in blocks)


def render_structured_cv_html(
    cv: StructuredCv,
    original_text: str = "",
    template_choice: str = "",
    cache: Optional[LayoutMetadataCache] = None,
) -> BuildResult:
    """
    Render a StructuredCv, taking the layout from original_text when given.

    Args:
        cv: Sanitized structured résumé
        original_text: Original résumé text; defaults to the CV's own text
        template_choice: Requested template name
        cache: Optional layout metadata cache

    Returns:
        BuildResult
    """
    text = structured_cv_to_text(cv)
    args = BuildArgs(
        title=cv.contact.full_name or DEFAULT_TITLE,
        original_resume_text=original_text or text,
        optimized_resume_text=text,
        template_choice=normalize_template_choice(template_choice),
    )
    return build_intelligent_resume_html(args, cache=cache)
