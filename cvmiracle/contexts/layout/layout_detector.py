"""
Layout metadata inference from original résumé text.

Detection looks only at the shape of the text (line lengths, blank lines,
heading case, keyword presence), never at parsed content. Thresholds live in
config/layout_detection.yaml.

Metadata is immutable and memoized per (text, requested template) in an
injected LayoutMetadataCache.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Optional, Tuple

from cvmiracle.contexts.intake.normalizer import STRUCTURE_PROFILE, looks_heading, normalize_unicode
from cvmiracle.contexts.intake.patterns import LinePatterns, match_canonical_heading
from cvmiracle.contexts.layout.cache import LayoutMetadataCache, make_key
from cvmiracle.contexts.layout.logger import log_layout_result
from cvmiracle.utils.config import load_config

LAYOUT_TYPES = ("single-column", "two-column-left", "two-column-right", "multi-block-asymmetric")
SPACING_PROFILES = ("compact", "balanced", "airy")
SPACING_RHYTHMS = ("tight", "regular", "relaxed")
HIERARCHY_STYLES = ("minimal", "classic", "executive")
HEADING_CAPITALIZATIONS = ("uppercase", "titlecase", "mixed")


@dataclass(frozen=True)
class LayoutPatterns:
    """Regex patterns for layout signals in raw text."""

    # Runs of capitals between newlines; \s spans newlines so adjacent headings count once
    UPPERCASE_HEADING_BLOCK: re.Pattern = re.compile(r"\n[A-Z\s]{4,}\n")

    SEPARATOR_RULE: re.Pattern = re.compile(r"[-_=]{3,}")

    ALIGNED_DATE: re.Pattern = re.compile(
        r"(?:19|20)\d{2}\s*[-–]\s*(?:(?:19|20)\d{2}|present|current|aujourd'hui)", re.IGNORECASE
    )

    ICON_BULLET: re.Pattern = re.compile(r"[•▪◦]")

    CONTACT_HEADER: re.Pattern = re.compile(r"@|linkedin|github|\+\d|\bfrance\b|\bremote\b", re.IGNORECASE)

    TITLECASE_LINE: re.Pattern = re.compile(
        r"^[A-ZÀÂÄÇÉÈÊËÎÏÔÖÙÛÜŸ][a-zàâäçéèêëîïôöùûüÿ'’-]+"
        r"(?:\s+(?:[A-ZÀÂÄÇÉÈÊËÎÏÔÖÙÛÜŸ][a-zàâäçéèêëîïôöùûüÿ'’-]+|&))+$"
    )

    CAPITALIZATION_REJECT: re.Pattern = re.compile(r"[.,;:!?@\d]")


@dataclass(frozen=True)
class VisualElements:
    separators: bool = False
    background_blocks: bool = False
    date_alignment: bool = False
    icon_like_bullets: bool = False
    contact_header: bool = False


@dataclass(frozen=True)
class LayoutMetadata:
    """
    Visual layout inferred from the original résumé.

    Never mutated after construction. section_order holds canonical heading
    names in first-seen order.
    """

    layout_type: str = "single-column"
    column_count: int = 1
    sidebar_position: str = "none"
    sidebar_width_ratio: float = 0.0
    primary_color: str = "#0f172a"
    accent_color: str = "#0ea5e9"
    spacing_profile: str = "balanced"
    density_profile: str = "balanced"
    spacing_rhythm: str = "regular"
    hierarchy_style: str = "executive"
    heading_capitalization: str = "mixed"
    section_order: Tuple[str, ...] = ()
    visual_elements_detected: VisualElements = VisualElements()

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["section_order"] = list(self.section_order)
        return data


# =============================================================================
# SIGNALS
# =============================================================================


def detect_spacing_profile(lines: List[str], thresholds: Dict[str, float]) -> str:
    """Classify the share of blank lines as compact, balanced or airy."""
    blank = sum(1 for line in lines if not line.strip())
    ratio = blank / max(1, len(lines))
    if ratio > thresholds["airy_above"]:
        return "airy"
    if ratio < thresholds["compact_below"]:
        return "compact"
    return "balanced"


def detect_spacing_rhythm(lines: List[str], thresholds: Dict[str, float]) -> str:
    """
    Classify the average length of consecutive blank-line runs.

    Example:
        >>> detect_spacing_rhythm(["a", "", "", "b", "", "", "c"], {"tight_at_most": 1.1, "relaxed_at_least": 1.8})
        'relaxed'
    """
    runs = []
    current = 0
    for line in lines:
        if not line.strip():
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)

    average = sum(runs) / len(runs) if runs else 0.0
    if average <= thresholds["tight_at_most"]:
        return "tight"
    if average >= thresholds["relaxed_at_least"]:
        return "relaxed"
    return "regular"


def detect_heading_capitalization(lines: List[str], thresholds: Dict[str, float]) -> str:
    """
    Classify how headings are cased among short, punctuation-free lines.

    Returns:
        "uppercase" when enough candidates are ALL CAPS, "titlecase" when
        enough are multi-word Title Case, else "mixed"
    """
    candidates = []
    for raw in lines:
        line = LinePatterns.BULLET_PREFIX.sub("", raw.strip())
        if not line or len(line) > thresholds["candidate_max_chars"]:
            continue
        if LayoutPatterns.CAPITALIZATION_REJECT.search(line) or not any(char.isalpha() for char in line):
            continue
        candidates.append(line)

    if not candidates:
        return "mixed"

    uppercase = sum(1 for line in candidates if line == line.upper())
    if uppercase / len(candidates) >= thresholds["uppercase_ratio"]:
        return "uppercase"

    titlecase = sum(1 for line in candidates if LayoutPatterns.TITLECASE_LINE.match(line))
    if titlecase / len(candidates) >= thresholds["titlecase_ratio"]:
        return "titlecase"
    return "mixed"


def detect_section_order(lines: List[str], limit: int) -> Tuple[str, ...]:
    """
    Canonical headings in order of first appearance.

    Example:
        >>> detect_section_order(["PROFIL", "x", "Expérience", "y", "Skills"], 14)
        ('Summary', 'Experience', 'Skills')
    """
    order: List[str] = []
    for line in lines:
        if not looks_heading(line, STRUCTURE_PROFILE):
            continue
        canonical = match_canonical_heading(line.strip().rstrip(":").strip())
        if canonical and canonical not in order:
            order.append(canonical)
    return tuple(order[:limit])


def detect_hierarchy_style(text: str, requested_template: Optional[str], config: Dict[str, Any]) -> str:
    """
    Hierarchy from the template hint, else from the number of ALL-CAPS heading blocks.

    Args:
        text: Original résumé text
        requested_template: Template name looked up in template_hints
        config: The "hierarchy" section of layout_detection.yaml
    """
    hint = config["template_hints"].get(requested_template or "")
    if hint:
        return hint
    if len(LayoutPatterns.UPPERCASE_HEADING_BLOCK.findall(text)) >= config["min_uppercase_headings"]:
        return "classic"
    return "executive"


def detect_columns(text: str, lines: List[str], config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decide between one column and a left or right sidebar.

    Two columns require all three signals: enough sidebar keywords, enough
    section keywords and a high share of short lines.
    """
    lower = text.lower()
    sidebar_hits = sum(1 for marker in config["sidebar_markers"] if marker in lower)
    section_hits = sum(1 for marker in config["section_markers"] if marker in lower)

    short_lines = sum(1 for line in lines if 0 < len(line.strip()) < config["short_line_chars"])
    short_ratio = short_lines / max(1, len(lines))

    two_columns = (
        sidebar_hits >= config["min_sidebar_hits"]
        and section_hits >= config["min_section_hits"]
        and short_ratio > config["min_short_ratio"]
    )
    if not two_columns:
        return dict(layout_type="single-column", column_count=1, sidebar_position="none", sidebar_width_ratio=0.0)

    left = any(marker in lower for marker in config["left_bias_markers"])
    return dict(
        layout_type="two-column-left" if left else "two-column-right",
        column_count=2,
        sidebar_position="left" if left else "right",
        sidebar_width_ratio=float(config["sidebar_width_ratio"]),
    )


def detect_visual_elements(text: str) -> VisualElements:
    return VisualElements(
        separators=bool(LayoutPatterns.SEPARATOR_RULE.search(text)),
        background_blocks=False,
        date_alignment=bool(LayoutPatterns.ALIGNED_DATE.search(text)),
        icon_like_bullets=bool(LayoutPatterns.ICON_BULLET.search(text)),
        contact_header=bool(LayoutPatterns.CONTACT_HEADER.search(text)),
    )


def infer_colors(requested_template: Optional[str], colors: Dict[str, Dict[str, str]]) -> Tuple[str, str]:
    palette = colors.get(requested_template or "", colors["default"])
    return palette["primary"], palette["accent"]


# =============================================================================
# DETECTION
# =============================================================================


def _detect(text: str, requested_template: Optional[str], config: Dict[str, Any]) -> LayoutMetadata:
    raw_lines = text.split("\n")
    spacing = detect_spacing_profile(raw_lines, config["spacing"])
    primary, accent = infer_colors(requested_template, config["colors"])

    return LayoutMetadata(
        **detect_columns(text, raw_lines, config["columns"]),
        primary_color=primary,
        accent_color=accent,
        spacing_profile=spacing,
        density_profile=spacing,
        spacing_rhythm=detect_spacing_rhythm(raw_lines, config["rhythm"]),
        hierarchy_style=detect_hierarchy_style(text, requested_template, config["hierarchy"]),
        heading_capitalization=detect_heading_capitalization(raw_lines, config["capitalization"]),
        section_order=detect_section_order(raw_lines, config["section_order_limit"]),
        visual_elements_detected=detect_visual_elements(text),
    )


def detect_layout_metadata(
    text: str,
    requested_template: Optional[str] = None,
    cache: Optional[LayoutMetadataCache] = None,
) -> LayoutMetadata:
    """
    Infer layout metadata from the original résumé text.

    Args:
        text: Original résumé text (line breaks and blank lines preserved)
        requested_template: Template choice or legacy name; hints in
            layout_detection.yaml steer hierarchy and colors
        cache: Optional memo shared across calls

    Returns:
        LayoutMetadata (the cached instance on a hit)

    Example:
        >>> metadata = detect_layout_metadata("Jane Doe\\nExperience\\nEngineer — Acme")
        >>> metadata.layout_type, metadata.column_count
        ('single-column', 1)
    """
    config = load_config("layout_detection")
    clean = normalize_unicode(text or "").replace("\r\n", "\n").replace("\r", "\n")

    key = None
    if cache is not None:
        key = make_key(text or "", requested_template, config["hash_prefix_chars"])
        cached = cache.get(key)
        if cached is not None:
            log_layout_result(cached, cache_hit=True)
            return cached

    metadata = _detect(clean, requested_template, config)
    if cache is not None:
        cache.put(key, metadata)
    log_layout_result(metadata, cache_hit=False)
    return metadata
