"""
CV Miracle - résumé structuring and one-page layout fitting

Turns unstructured résumé text into a structured, bullet-level representation
and lays it back out as printable HTML that fits on a single page.

Architecture:
- Intake Context: Text normalization, section segmentation, entry and contact extraction
- Structuring Context: Structured CV model, sanitization, merge, validation, dates
- Layout Context: Layout inference, template variants, style, page fitting
- Rendering Context: HTML generation from structured data and style parameters
"""

__version__ = "0.1.0"
