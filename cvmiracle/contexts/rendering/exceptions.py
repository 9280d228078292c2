"""Errors raised while turning fitted résumé sections into HTML."""

from pathlib import Path
from typing import Optional


class TemplateRenderError(Exception):
    """
    The résumé page template could not be loaded or rendered.

    Wraps the Jinja2 error so callers report a single exception type. The
    message is one line naming the template file, the Jinja2 line number
    when known, and the variant being drawn.

    Attributes:
        template_name: Template name without suffix ("resume")
        template_path: Template file on disk
        variant: Template variant being rendered, if known
        lineno: Line of the template where Jinja2 failed, if known
        original_error: The Jinja2 exception
    """

    def __init__(
        self,
        message: str,
        template_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        variant: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.template_name = template_name
        self.template_path = template_path
        self.variant = variant
        self.original_error = original_error
        self.lineno = getattr(original_error, "lineno", None)

        location = str(template_path or template_name or "")
        if location and self.lineno:
            location = f"{location}:{self.lineno}"

        details = [message]
        if location:
            details.append(f"template {location}")
        if variant:
            details.append(f"variant {variant}")
        if original_error is not None:
            details.append(f"{type(original_error).__name__}: {original_error}")

        super().__init__(" | ".join(details))
