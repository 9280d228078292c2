"""
Structuring Context

Responsibilities:
- Owns the StructuredCv and HybridCvForm data shapes and the mappings between them
- Sanitizes arbitrary input into those shapes (trim, dedupe, cap)
- Merges fallible AI extraction output over heuristic parses
- Validates completeness, scores confidence and detects date overlaps

Owns: Structured résumé model, sanitization and validation rules
Never: Reads files, calls AI providers directly from core functions, or lays out pages
"""
