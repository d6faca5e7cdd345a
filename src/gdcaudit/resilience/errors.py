"""Error types and classification for upstream model calls.

Every failure mode of the invoker is mapped onto a DegradedReason so the
analyzer can explain, in the verdict itself, why it fell back to the
simulation table.
"""

from __future__ import annotations

import asyncio
from enum import Enum

from gdcaudit.constants import DegradedReason


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors
    SERVER = "server"  # 500, 502, 503
    TIMEOUT = "timeout"  # deadline exceeded
    CLIENT = "client"  # 400, 401, 403
    UNKNOWN = "unknown"  # unclassified


class AnalysisError(Exception):
    """Base for failures that the analyzer converts into a degraded verdict."""

    def __init__(self, reason: DegradedReason, message: str) -> None:
        super().__init__(message)
        self.reason = reason


class CredentialError(AnalysisError):
    """Credential absent or not shaped like an Anthropic key."""


class UpstreamError(AnalysisError):
    """The remote model call failed or returned an unusable body."""


def classify_error(error: Exception) -> ErrorClass:
    """Classify an error by status_code first, then by message text."""
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 408:
            return ErrorClass.TIMEOUT
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("400", "401", "403", "404")):
        return ErrorClass.CLIENT

    return ErrorClass.UNKNOWN


def degraded_reason_for(error: Exception) -> DegradedReason:
    """Map a raw transport exception onto the upstream failure kinds."""
    if isinstance(error, AnalysisError):
        return error.reason
    error_class = classify_error(error)
    if error_class is ErrorClass.TIMEOUT:
        return DegradedReason.UPSTREAM_TIMEOUT
    if isinstance(getattr(error, "status_code", None), int):
        return DegradedReason.UPSTREAM_HTTP_ERROR
    if error_class in (ErrorClass.CLIENT, ErrorClass.SERVER):
        return DegradedReason.UPSTREAM_HTTP_ERROR
    return DegradedReason.UPSTREAM_CONNECTIVITY
