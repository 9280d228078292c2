"""
Template choices and layout-to-variant mapping.

Template choices are the five names offered to users. Variants are the
internal layouts the renderer knows how to draw; one is picked per résumé
from its detected LayoutMetadata.
"""

from typing import Optional

from cvmiracle.contexts.layout.layout_detector import LayoutMetadata

TEMPLATE_CHOICES = (
    "Executive Classic",
    "Modern Sidebar",
    "Minimal ATS",
    "Executive Grey",
    "Modern Accent",
)
DEFAULT_TEMPLATE_CHOICE = "Executive Classic"

# Names used by earlier versions of the template picker
LEGACY_TEMPLATE_ALIASES = {
    "Original Design Enhanced": "Executive Classic",
    "Modern Executive": "Modern Sidebar",
}

TEMPLATE_VARIANTS = (
    "template_two_column_left_v2",
    "template_two_column_right_v2",
    "template_minimal_compact",
    "template_executive_balanced",
    "template_asymmetric_signature",
)


def normalize_template_choice(value: Optional[str]) -> str:
    """
    Map any requested template name onto one of the five template choices.

    Example:
        >>> normalize_template_choice("Modern Executive")
        'Modern Sidebar'
        >>> normalize_template_choice("Unknown")
        'Executive Classic'
    """
    clean = (value or "").strip()
    if clean in TEMPLATE_CHOICES:
        return clean
    return LEGACY_TEMPLATE_ALIASES.get(clean, DEFAULT_TEMPLATE_CHOICE)


def map_layout_to_template(metadata: LayoutMetadata) -> str:
    """
    Pick the template variant that best reproduces a detected layout.

    Args:
        metadata: Detected layout metadata

    Returns:
        One of TEMPLATE_VARIANTS

    Example:
        >>> map_layout_to_template(LayoutMetadata(layout_type="two-column-left", column_count=2))
        'template_two_column_left_v2'
        >>> map_layout_to_template(LayoutMetadata(hierarchy_style="minimal"))
        'template_minimal_compact'
    """
    if metadata.layout_type == "two-column-left":
        return "template_two_column_left_v2"
    if metadata.layout_type == "two-column-right":
        return "template_two_column_right_v2"
    if metadata.layout_type == "multi-block-asymmetric":
        return "template_asymmetric_signature"
    if metadata.hierarchy_style == "minimal":
        return "template_minimal_compact"
    return "template_executive_balanced"
