"""Serverless function entry point (Netlify / Lambda proxy event shape).

Translates ``{"httpMethod", "body"}`` events into one analyzer call and
returns ``{"statusCode", "headers", "body"}``. The analyzer is built
lazily from the environment and reused across warm invocations.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from pydantic import ValidationError

from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.api.schemas import AnalyzeRequest
from gdcaudit.config import AnalysisConfig, Settings
from gdcaudit.constants import CORS_HEADERS
from gdcaudit.logging_config import setup_logging

logger = logging.getLogger(__name__)

_analyzer: ComplianceAnalyzer | None = None


def _get_analyzer() -> ComplianceAnalyzer:
    global _analyzer  # noqa: PLW0603
    if _analyzer is None:
        settings = Settings()
        setup_logging(settings.log_level)
        _analyzer = ComplianceAnalyzer(AnalysisConfig.from_settings(settings))
    return _analyzer


def _response(status_code: int, payload: dict[str, Any] | None) -> dict[str, Any]:
    headers = {"Access-Control-Allow-Origin": "*"}
    if payload is None:
        return {"statusCode": status_code, "headers": CORS_HEADERS, "body": ""}
    headers["Content-Type"] = "application/json"
    return {
        "statusCode": status_code,
        "headers": headers,
        "body": json.dumps(payload),
    }


async def handle_event(
    event: dict[str, Any], analyzer: ComplianceAnalyzer
) -> dict[str, Any]:
    """Route one event: pre-flight, method check, validation, analysis."""
    method = str(event.get("httpMethod", "")).upper()
    if method == "OPTIONS":
        return _response(200, None)
    if method != "POST":
        return _response(405, {"error": "Method not allowed"})

    try:
        raw = json.loads(event.get("body") or "{}")
        body = AnalyzeRequest.model_validate(raw)
    except (json.JSONDecodeError, ValidationError) as exc:
        logger.info("event=bad_request error=%s", type(exc).__name__)
        return _response(
            400,
            {"error": "Body must contain a valid requirement and document"},
        )

    result = await analyzer.analyze(body.requirement, body.document)
    return _response(200, result.to_payload())


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    """Synchronous platform entry point."""
    return asyncio.run(handle_event(event, _get_analyzer()))
