from __future__ import annotations

SCRUB_SYSTEM_PROMPT = (
    "You are a professional resume anonymization assistant that removes personal "
    "information while preserving professional details."
)

_REMOVE = [
    "Names (first, last, full)",
    "Email addresses",
    "Phone numbers",
    "Physical addresses",
    "Social media handles",
    "Personal websites",
    "Age, gender, or other demographic information",
    "Photos or image references",
    "References to specific schools, universities, or educational institutions",
    "References to specific companies or organizations",
    "Dates (years can be kept but specific dates should be removed)",
]

_PRESERVE = [
    "Professional skills and qualifications",
    "Job titles and roles",
    "Years of experience",
    "Technical skills and tools",
    "Project descriptions",
    "Achievements and accomplishments",
    "Industry-specific terminology",
]

_FORMAT = [
    "Return only the scrubbed text",
    "Do not include any explanations or metadata",
    "Maintain the original structure and formatting where possible",
    "Use placeholders like [COMPANY], [UNIVERSITY], etc. for removed information",
]


def _bullets(items: list[str]) -> str:
    return "\n".join(f"   - {item}" for item in items)


def build_scrub_prompts(*, text: str) -> tuple[str, str]:
    """
    Create (system_prompt, user_prompt) for single-shot resume scrubbing.

    The rubric is fixed; only the resume text varies. The text goes last so the
    instructions can't be pushed out of view by a long resume.
    """

    user_prompt = "\n".join(
        [
            "You are a resume anonymization assistant. Your task is to remove all personal "
            "identifying information from the following text while preserving professional "
            "experience and skills. Specifically:",
            "",
            "1. Remove or replace:",
            _bullets(_REMOVE),
            "",
            "2. Preserve:",
            _bullets(_PRESERVE),
            "",
            "3. Format:",
            _bullets(_FORMAT),
            "",
            "Here is the text to process:",
            text,
        ]
    )
    return SCRUB_SYSTEM_PROMPT, user_prompt
