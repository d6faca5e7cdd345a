"""Shared constants used across modules.

StrEnum members are str-compatible, so downstream code (JSON payloads,
YAML tables, log lines) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class ComplianceStatus(StrEnum):
    """Verdict status for one requirement against one document."""

    MET = "met"
    PARTIALLY_MET = "partially-met"
    NOT_MET = "not-met"
    NOT_FOUND = "not-found"


class DegradedReason(StrEnum):
    """Why a verdict came from the simulator instead of the model."""

    CREDENTIAL_MISSING = "credential_missing"
    CREDENTIAL_MALFORMED = "credential_malformed"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    UPSTREAM_HTTP_ERROR = "upstream_http_error"
    UPSTREAM_MALFORMED_BODY = "upstream_malformed_body"
    UPSTREAM_CONNECTIVITY = "upstream_connectivity"
    PARSE_DEGRADED = "parse_degraded"


class RequirementCategory(StrEnum):
    """Accreditation weight class of a requirement."""

    CRITICAL = "critical"
    IMPORTANT = "important"
    STANDARD = "standard"


class InspectionReadiness(StrEnum):
    READY = "ready"
    PARTIAL = "partial"
    NOT_READY = "not-ready"


class PriorityLevel(StrEnum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# ── Response Grammar Labels ──────────────────────────────


class Label(StrEnum):
    """Block labels of the fixed model response grammar."""

    STATUS = "STATUS"
    EVIDENCE = "EVIDENCE"
    EVIDENCE_FOUND = "EVIDENCE_FOUND"
    MISSING_ELEMENTS = "MISSING_ELEMENTS"
    RECOMMENDATIONS = "RECOMMENDATIONS"
    CONFIDENCE = "CONFIDENCE"
    DOCUMENT_REFERENCES = "DOCUMENT_REFERENCES"
    GOLD_STANDARD_PRACTICES = "GOLD_STANDARD_PRACTICES"
    IMPLEMENTATION_TIMELINE = "IMPLEMENTATION_TIMELINE"


LIST_DELIMITER = "|"

# ── Confidence ───────────────────────────────────────────

CONFIDENCE_MIN = 0
CONFIDENCE_MAX = 100
DEFAULT_CONFIDENCE = 50
DEGRADED_CONFIDENCE_CEILING = 60

# ── Scoring ──────────────────────────────────────────────

STATUS_BASE_SCORE: dict[str, int] = {
    ComplianceStatus.MET.value: 85,
    ComplianceStatus.PARTIALLY_MET.value: 65,
}
FALLBACK_BASE_SCORE = 35
CONFIDENCE_BONUS_MAX = 20
CRITICAL_CATEGORY_BONUS = 3
SCORE_FLOOR = 20
SCORE_CEILING = 98

READY_SCORE_THRESHOLD = 80
PARTIAL_SCORE_THRESHOLD = 60
CRITICAL_ACTION_SCORE_THRESHOLD = 70
MAX_CRITICAL_ACTIONS = 3

# ── Credentials ──────────────────────────────────────────

CREDENTIAL_PREFIX = "sk-ant-"
CREDENTIAL_MIN_LENGTH = 40
KEY_PREVIEW_CHARS = 10

# ── Prompting ────────────────────────────────────────────

DEFAULT_EXCERPT_CHARS = 3000

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200

# ── Paths open without X-API-Key ─────────────────────────

PUBLIC_PATH_PREFIXES = (
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)

# ── CORS ─────────────────────────────────────────────────

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}
