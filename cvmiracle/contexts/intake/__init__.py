"""
Intake Context

Responsibilities:
- Normalizes raw résumé and job-offer text
- Classifies lines (heading, bullet, entry header, company line)
- Segments résumé text into named sections
- Extracts experience entries and contact details from free text

Owns: Text normalization, heading canonicalization, line-level heuristics
Never: Sanitizes structured data or makes layout decisions
"""
