"""
Structured résumé data structures for the Structuring context.

Two shapes describe a parsed résumé:
- StructuredCv: flat representation consumed by rendering
- HybridCvForm: richer representation used during guided correction

Instances are built by the heuristic parser or by sanitizing arbitrary
input (dicts from JSON or AI output); see sanitizer.py. to_dict() emits
snake_case keys; readers accept both snake_case and camelCase.
"""

from dataclasses import asdict, dataclass, field, is_dataclass
from typing import Any


def camel_case(name: str) -> str:
    """
    Convert a snake_case field name to camelCase.

    Example:
        >>> camel_case("full_name")
        'fullName'
    """
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def read_field(source: Any, name: str, default: Any = None) -> Any:
    """
    Read a field from a dataclass instance or a dict.

    Dict lookups try the snake_case name, then its camelCase form.

    Args:
        source: Dataclass instance, dict, or anything else
        name: snake_case field name
        default: Value returned when the field is missing

    Returns:
        The raw field value or default
    """
    if isinstance(source, dict):
        if name in source:
            return source[name]
        return source.get(camel_case(name), default)
    if is_dataclass(source) and not isinstance(source, type):
        return getattr(source, name, default)
    return default


# =============================================================================
# STRUCTURED CV
# =============================================================================


@dataclass
class ContactBlock:
    """Contact fields carried by a StructuredCv."""

    full_name: str = ""
    email: str = ""
    phone: str = ""


@dataclass
class Experience:
    """One dated job entry with up to four bullet achievements."""

    title: str
    company: str = ""
    date: str = ""
    location: str = ""
    bullets: list[str] = field(default_factory=list)


@dataclass
class StructuredCv:
    """
    Canonical flat résumé representation.

    Caps (enforced by sanitize_structured_cv): bullets 4 per experience,
    education 14, skills 18, languages 10, additional 12.
    """

    contact: ContactBlock = field(default_factory=ContactBlock)
    summary: str = ""
    experiences: list[Experience] = field(default_factory=list)
    education: list[str] = field(default_factory=list)
    skills: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    additional: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# =============================================================================
# HYBRID FORM
# =============================================================================


@dataclass
class HybridPersonalInfo:
    full_name: str = ""
    city: str = ""
    phone: str = ""
    email: str = ""
    linkedin: str = ""


@dataclass
class HybridExperience:
    job_title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    achievements: list[str] = field(default_factory=list)


@dataclass
class HybridEducation:
    degree: str = ""
    institution: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""


@dataclass
class HybridLanguage:
    language: str = ""
    level: str = ""


@dataclass
class HybridCvForm:
    """
    Richer résumé representation used while the user corrects the parse.

    Caps (enforced by sanitize_hybrid_cv_form): achievements 6 per
    experience, hard/soft skills 30 each, certifications, volunteering and
    interests 20 each.
    """

    personal_info: HybridPersonalInfo = field(default_factory=HybridPersonalInfo)
    summary: str = ""
    experience: list[HybridExperience] = field(default_factory=list)
    education: list[HybridEducation] = field(default_factory=list)
    hard_skills: list[str] = field(default_factory=list)
    soft_skills: list[str] = field(default_factory=list)
    languages: list[HybridLanguage] = field(default_factory=list)
    certifications: list[str] = field(default_factory=list)
    volunteering: list[str] = field(default_factory=list)
    interests: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HybridConfidence:
    """
    Per-category completeness scores in [0, 100].

    global_score is the rounded mean of the ten category scores; it is
    serialized under the key "global".
    """

    personal_info: int
    summary: int
    experience: int
    education: int
    hard_skills: int
    soft_skills: int
    languages: int
    certifications: int
    volunteering: int
    interests: int
    global_score: int

    def category_scores(self) -> list[int]:
        return [
            self.personal_info,
            self.summary,
            self.experience,
            self.education,
            self.hard_skills,
            self.soft_skills,
            self.languages,
            self.certifications,
            self.volunteering,
            self.interests,
        ]

    def to_dict(self) -> dict[str, int]:
        data = asdict(self)
        data["global"] = data.pop("global_score")
        return data
