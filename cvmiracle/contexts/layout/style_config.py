"""
Numeric style parameters for a rendered résumé.

resolve_style_config() is a pure function of (metadata, variant). Sizes are
in px except page padding (mm) and the sidebar ratio (fraction of width).
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

from cvmiracle.contexts.layout.layout_detector import LayoutMetadata

FONT_FAMILY = '"Inter", "Helvetica Neue", Helvetica, "Segoe UI", Arial, sans-serif'
DEFAULT_SIDEBAR_RATIO = 0.31
MIN_SECTION_GAP = 6
MIN_COLUMN_FRACTION = 0.6


@dataclass(frozen=True)
class StyleConfig:
    font_family: str
    base_font_size: float
    line_height: float
    section_gap: int
    block_gap: int
    page_padding_mm: int
    header_name_size: int
    section_title_size: int
    primary_color: str
    accent_color: str
    sidebar_ratio: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _by_spacing(spacing_profile: str, compact, balanced, airy):
    if spacing_profile == "compact":
        return compact
    if spacing_profile == "airy":
        return airy
    return balanced


def resolve_style_config(metadata: LayoutMetadata, variant: str) -> StyleConfig:
    """
    Resolve font sizes, gaps, colors and sidebar width.

    Args:
        metadata: Detected layout metadata
        variant: Template variant from map_layout_to_template()

    Returns:
        StyleConfig

    Example:
        >>> style = resolve_style_config(LayoutMetadata(spacing_profile="compact"), "template_minimal_compact")
        >>> style.base_font_size, style.header_name_size, style.sidebar_ratio
        (10.5, 22, 0)
    """
    spacing = metadata.spacing_profile
    minimal = variant == "template_minimal_compact"

    return StyleConfig(
        font_family=FONT_FAMILY,
        base_font_size=_by_spacing(spacing, 10.5, 10.8, 11),
        line_height=_by_spacing(spacing, 1.22, 1.28, 1.33),
        section_gap=_by_spacing(spacing, 7, 8, 10),
        block_gap=_by_spacing(spacing, 5, 6, 8),
        page_padding_mm=8 if spacing == "compact" else 9,
        header_name_size=22 if minimal else 24,
        section_title_size=12 if minimal else 13,
        primary_color=metadata.primary_color,
        accent_color=metadata.accent_color,
        sidebar_ratio=(metadata.sidebar_width_ratio or DEFAULT_SIDEBAR_RATIO) if metadata.column_count == 2 else 0,
    )


def section_gap_for_rhythm(style: StyleConfig, rhythm: str) -> int:
    """
    Adjust the section gap to the detected blank-line rhythm.

    Example:
        >>> style = resolve_style_config(LayoutMetadata(), "template_executive_balanced")
        >>> section_gap_for_rhythm(style, "tight"), section_gap_for_rhythm(style, "relaxed")
        (7, 9)
    """
    if rhythm == "tight":
        return max(MIN_SECTION_GAP, style.section_gap - 1)
    if rhythm == "relaxed":
        return style.section_gap + 1
    return style.section_gap


def column_fractions(style: StyleConfig, sidebar_position: str) -> str:
    """
    CSS grid-template-columns value for a two-column page.

    Example:
        >>> style = resolve_style_config(LayoutMetadata(column_count=2, sidebar_width_ratio=0.31), "x")
        >>> column_fractions(style, "left")
        '0.60fr 0.69fr'
    """
    ratio = style.sidebar_ratio or DEFAULT_SIDEBAR_RATIO
    left, right = (ratio, 1 - ratio) if sidebar_position == "left" else (1 - ratio, ratio)
    return f"{max(MIN_COLUMN_FRACTION, left):.2f}fr {max(MIN_COLUMN_FRACTION, right):.2f}fr"
