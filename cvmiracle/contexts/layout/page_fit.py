"""
One-page fitting by section-priority line trimming.

Section height is estimated in abstract units: a fixed cost per heading
plus, per line, one unit for every started block of chars_per_unit
characters. While the total exceeds the template's budget, the last line of
the lowest-priority section still above its minimum is removed. Sections
never drop below their minimum, so pathological input may stay over budget;
that is reported in the result, not raised.

All constants come from config/page_fit.yaml, merged with the YAML file
named by PAGE_FIT_CONFIG_PATH when set.
"""

import math
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from dotenv import load_dotenv

from cvmiracle.contexts.intake.normalizer import normalize_heading
from cvmiracle.contexts.intake.patterns import LinePatterns
from cvmiracle.contexts.intake.segmenter import ResumeSection
from cvmiracle.contexts.layout.logger import log_fit_result
from cvmiracle.utils.config import load_config
from cvmiracle.utils.text_processing import truncate_with_ellipsis

load_dotenv()

DENSITY_CLASSES = ("tight", "normal", "relaxed")


@dataclass
class FitResult:
    """
    Outcome of fitting sections to one page.

    Attributes:
        sections: Trimmed sections with canonical headings, in input order
        units: Estimated size of the trimmed sections
        budget: Unit budget of the template
        density_class: "tight", "normal" or "relaxed"
        removed_lines: Lines removed by the budget loop (not counting per-heading caps)
    """

    sections: List[ResumeSection] = field(default_factory=list)
    units: float = 0.0
    budget: float = 0.0
    density_class: str = "relaxed"
    removed_lines: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sections": [{"heading": s.heading, "lines": list(s.lines)} for s in self.sections],
            "units": self.units,
            "budget": self.budget,
            "density_class": self.density_class,
            "removed_lines": self.removed_lines,
        }


def load_page_fit_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Page-fit constants: packaged defaults, then PAGE_FIT_CONFIG_PATH, then overrides."""
    return load_config("page_fit", overrides=overrides, extra_path=os.getenv("PAGE_FIT_CONFIG_PATH") or None)


def estimate_line_units(line: str, chars_per_unit: int = 96) -> int:
    """
    Units taken by one line; bullet glyphs do not count.

    Example:
        >>> estimate_line_units("- short")
        1
        >>> estimate_line_units("x" * 200)
        3
    """
    bare = LinePatterns.BULLET_PREFIX.sub("", line.strip())
    return max(1, math.ceil(len(bare) / chars_per_unit))


def estimate_section_units(section: ResumeSection, heading_units: float = 1.5, chars_per_unit: int = 96) -> float:
    """Units taken by a section: heading cost plus its lines."""
    return heading_units + sum(estimate_line_units(line, chars_per_unit) for line in section.lines)


def budget_for_template(template_choice: Optional[str], config: Dict[str, Any]) -> float:
    budgets = config["budgets"]
    return budgets.get(template_choice or "", budgets["default"])


def classify_density(units: float, budget: float, thresholds: Dict[str, float]) -> str:
    """
    Qualitative readout of how full the page is.

    Example:
        >>> classify_density(90, 95, {"tight": 0.93, "normal": 0.82})
        'tight'
        >>> classify_density(50, 95, {"tight": 0.93, "normal": 0.82})
        'relaxed'
    """
    if units > budget * thresholds["tight"]:
        return "tight"
    if units > budget * thresholds["normal"]:
        return "normal"
    return "relaxed"


def fit_sections_for_one_page(
    sections: Sequence[ResumeSection],
    template_choice: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> FitResult:
    """
    Trim sections so the estimated page size fits the template budget.

    Steps:
    1. Canonicalize headings, cap lines per heading, truncate long lines
    2. While over budget, drop the last line of the lowest-priority section
       still above its minimum (first such section on ties)
    3. Classify the final density

    Args:
        sections: Parsed sections (input is not modified)
        template_choice: Template name selecting the unit budget
        config: Optional overrides merged over the page-fit config

    Returns:
        FitResult

    Example:
        >>> result = fit_sections_for_one_page([ResumeSection("Skills", ["Python"] * 20)])
        >>> len(result.sections[0].lines), result.budget
        (10, 95)
    """
    cfg = load_page_fit_config(config)
    heading_units = cfg["unit_cost"]["heading_units"]
    chars_per_unit = cfg["unit_cost"]["chars_per_unit"]

    fitted = []
    for section in sections:
        heading = normalize_heading(section.heading)
        max_lines = cfg["max_lines"].get(heading, cfg["default_max_lines"])
        lines = [truncate_with_ellipsis(line, cfg["max_line_chars"]) for line in section.lines[:max_lines]]
        fitted.append(ResumeSection(heading=heading, lines=lines))

    def total_units() -> float:
        return sum(estimate_section_units(section, heading_units, chars_per_unit) for section in fitted)

    budget = budget_for_template(template_choice, cfg)
    units = total_units()
    removed = 0

    while units > budget:
        removable = [
            section
            for section in fitted
            if len(section.lines) > cfg["min_lines"].get(section.heading, cfg["default_min_lines"])
        ]
        if not removable:
            break
        victim = max(removable, key=lambda section: cfg["priority"].get(section.heading, cfg["default_priority"]))
        victim.lines.pop()
        removed += 1
        units = total_units()

    result = FitResult(
        sections=fitted,
        units=units,
        budget=budget,
        density_class=classify_density(units, budget, cfg["density_thresholds"]),
        removed_lines=removed,
    )
    log_fit_result(result)
    return result
