"""Parse labeled model text into a Verdict, degrading instead of raising."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from gdcaudit.analysis.schemas import Verdict
from gdcaudit.constants import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    DEFAULT_CONFIDENCE,
    LIST_DELIMITER,
    ComplianceStatus,
    Label,
)

logger = logging.getLogger(__name__)

# "LABEL: value" at line start, tolerant of markdown bold and spacing
_LABEL_RE = re.compile(
    r"^\s*\**\s*(?P<label>[A-Z_]+)\s*\**\s*:\s*\**\s*(?P<value>.*)$"
)
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")

_KNOWN_LABELS = frozenset(str(label) for label in Label)

_LIST_FIELDS: dict[str, str] = {
    Label.EVIDENCE: "evidence",
    Label.EVIDENCE_FOUND: "evidence",
    Label.MISSING_ELEMENTS: "missing_elements",
    Label.RECOMMENDATIONS: "recommendations",
    Label.DOCUMENT_REFERENCES: "document_references",
    Label.GOLD_STANDARD_PRACTICES: "gold_standard_practices",
    Label.IMPLEMENTATION_TIMELINE: "implementation_timeline",
}

_STATUS_VALUES = {s.value: s for s in ComplianceStatus}


@dataclass(frozen=True)
class NormalizedResponse:
    """Verdict plus the list of defaults applied while parsing."""

    verdict: Verdict
    issues: tuple[str, ...] = field(default_factory=tuple)
    parse_failed: bool = False


def _match_label(line: str) -> tuple[str, str] | None:
    m = _LABEL_RE.match(line)
    if m is None or m.group("label") not in _KNOWN_LABELS:
        return None
    return m.group("label"), m.group("value").strip()


def _split_blocks(text: str) -> dict[str, str]:
    """Map each label to its raw value.

    The value is the text after the colon; when that is empty the next
    non-blank, unlabeled line is used instead. First occurrence wins.
    """
    lines = text.splitlines()
    blocks: dict[str, str] = {}
    for i, line in enumerate(lines):
        matched = _match_label(line)
        if matched is None:
            continue
        label, value = matched
        if not value:
            for following in lines[i + 1:]:
                if not following.strip():
                    continue
                if _match_label(following) is None:
                    value = following.strip()
                break
        blocks.setdefault(label, value)
    return blocks


def _strip_brackets(value: str) -> str:
    value = value.strip()
    if value.startswith("[") and value.endswith("]"):
        value = value[1:-1]
    return value.strip()


def parse_list(value: str) -> tuple[str, ...]:
    """Split a pipe-delimited value, dropping empty items."""
    items = _strip_brackets(value).split(LIST_DELIMITER)
    return tuple(item.strip() for item in items if item.strip())


def parse_status(value: str) -> ComplianceStatus | None:
    token = _strip_brackets(value).strip(" .*").lower()
    token = token.replace("_", "-").replace(" ", "-")
    return _STATUS_VALUES.get(token)


def parse_confidence(value: str) -> int | None:
    """First number in the block, clamped to [0, 100]."""
    m = _NUMBER_RE.search(value)
    if m is None:
        return None
    # Clamp as float: huge digit runs parse to inf, which round() rejects
    raw = max(CONFIDENCE_MIN, min(CONFIDENCE_MAX, float(m.group())))
    return round(raw)


def normalize_response(text: str) -> NormalizedResponse:
    """Parse a response in the fixed grammar into a well-formed Verdict.

    Never raises. Missing list blocks become empty lists, unknown
    status tokens become ``not-found``, and an absent or unreadable
    confidence becomes the conservative default.
    """
    blocks = _split_blocks(text or "")
    issues: list[str] = []

    if not blocks:
        logger.warning(
            "event=response_unparseable response_len=%d",
            len(text or ""),
        )
        return NormalizedResponse(
            verdict=Verdict(confidence=DEFAULT_CONFIDENCE),
            issues=("no recognised blocks",),
            parse_failed=True,
        )

    status = ComplianceStatus.NOT_FOUND
    if Label.STATUS in blocks:
        parsed_status = parse_status(blocks[Label.STATUS])
        if parsed_status is None:
            issues.append(
                f"unrecognised status {blocks[Label.STATUS]!r}"
            )
        else:
            status = parsed_status
    else:
        issues.append("missing STATUS block")

    confidence = DEFAULT_CONFIDENCE
    if Label.CONFIDENCE in blocks:
        parsed_confidence = parse_confidence(blocks[Label.CONFIDENCE])
        if parsed_confidence is None:
            issues.append("unreadable CONFIDENCE block")
        else:
            confidence = parsed_confidence
    else:
        issues.append("missing CONFIDENCE block")

    lists: dict[str, tuple[str, ...]] = {}
    for label, field_name in _LIST_FIELDS.items():
        if label in blocks and field_name not in lists:
            lists[field_name] = parse_list(blocks[label])

    if issues:
        logger.debug(
            "event=response_defaults_applied issues=%s",
            "; ".join(issues),
        )

    return NormalizedResponse(
        verdict=Verdict(status=status, confidence=confidence, **lists),
        issues=tuple(issues),
    )
