"""LLM integration layer.

This package is intentionally small:
- No prompt/output logging (resume text is personal data).
- Configurable via environment variables.
- One attempt per upstream call; callers decide how failures surface.
"""
