"""
Rendering Context

Responsibilities:
- Turns fitted sections and layout decisions into printable HTML
- Loads and caches Jinja2 page templates
- Re-cases headings and lays out experience entries and dated rows

Owns: HTML output, page templates
Never: Parses résumé structure, infers layout, or decides what content to trim
"""
