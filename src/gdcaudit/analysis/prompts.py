"""Compliance prompt and the fixed response grammar it asks for.

The instruction text must stay free of simulation-table keywords:
fallback selection scans the whole prompt, and only the caller's
requirement and document should steer it.
"""

from __future__ import annotations

from gdcaudit.analysis.schemas import Document, Requirement, Verdict
from gdcaudit.constants import DEFAULT_EXCERPT_CHARS, LIST_DELIMITER, Label

RESPONSE_GRAMMAR = f"""\
{Label.STATUS}: [met/partially-met/not-met/not-found]
{Label.EVIDENCE}: [evidence1|evidence2|evidence3]
{Label.MISSING_ELEMENTS}: [missing1|missing2|missing3]
{Label.RECOMMENDATIONS}: [recommendation1|recommendation2|recommendation3]
{Label.CONFIDENCE}: [0-100]%
{Label.DOCUMENT_REFERENCES}: [reference1|reference2]
{Label.GOLD_STANDARD_PRACTICES}: [practice1|practice2]
{Label.IMPLEMENTATION_TIMELINE}: [step1|step2]"""

COMPLIANCE_PROMPT = """\
You are a dental education compliance expert analyzing documents against \
General Dental Council (GDC) standards.

CRITICAL: You MUST respond in EXACTLY this format - no additional text. \
Each field sits on a single line; separate list items with "|". \
The last three fields are optional.

{grammar}

REQUIREMENT ANALYSIS:
- Code: {code}
- Title: {title}
- Description: {description}
- Criteria: {criteria}

DOCUMENT CONTEXT:
- File: {document_name}
- Content Sample: {content}

Analyze the document content against the requirement criteria. Be specific \
about what evidence you found or what's missing."""


def truncate_excerpt(text: str, limit: int = DEFAULT_EXCERPT_CHARS) -> str:
    """Bound the document text embedded in the prompt."""
    return text[:limit]


def build_compliance_prompt(
    requirement: Requirement,
    document: Document,
    excerpt_chars: int = DEFAULT_EXCERPT_CHARS,
) -> str:
    """Assemble the single user-role prompt for one requirement."""
    return COMPLIANCE_PROMPT.format(
        grammar=RESPONSE_GRAMMAR,
        code=requirement.code,
        title=requirement.title,
        description=requirement.description,
        criteria="; ".join(requirement.criteria),
        document_name=document.name,
        content=truncate_excerpt(document.text_content, excerpt_chars),
    )


def _join(items: tuple[str, ...]) -> str:
    return LIST_DELIMITER.join(items)


def render_response(verdict: Verdict) -> str:
    """Render a verdict in the response grammar.

    Optional blocks are emitted only when populated, mirroring what a
    well-behaved model returns.
    """
    lines = [
        f"{Label.STATUS}: {verdict.status}",
        f"{Label.EVIDENCE}: {_join(verdict.evidence)}",
        f"{Label.MISSING_ELEMENTS}: {_join(verdict.missing_elements)}",
        f"{Label.RECOMMENDATIONS}: {_join(verdict.recommendations)}",
        f"{Label.CONFIDENCE}: {verdict.confidence}%",
    ]
    optional = (
        (Label.DOCUMENT_REFERENCES, verdict.document_references),
        (Label.GOLD_STANDARD_PRACTICES, verdict.gold_standard_practices),
        (Label.IMPLEMENTATION_TIMELINE, verdict.implementation_timeline),
    )
    for label, items in optional:
        if items:
            lines.append(f"{label}: {_join(items)}")
    return "\n".join(lines)
