"""
Layout Context

Responsibilities:
- Infers layout metadata (columns, spacing, rhythm, heading case, section order) from original text
- Maps metadata to a template variant and resolves numeric style parameters
- Fits sections to a single page by priority-ordered line trimming

Owns: LayoutMetadata, template variants, style config, page-fit budgets
Never: Parses résumé content into structured fields or produces HTML
"""
