"""Compliance analysis endpoints."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse

from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.analysis.schemas import Requirement
from gdcaudit.analysis.scoring import build_report
from gdcaudit.api.dependencies import (
    get_analysis_logger,
    get_analyzer,
    get_settings,
)
from gdcaudit.api.schemas import AnalyzeRequest, APIResponse, ReportRequest
from gdcaudit.catalogue import get_requirement, load_catalogue
from gdcaudit.config import Settings
from gdcaudit.constants import CORS_HEADERS, DegradedReason
from gdcaudit.logger import AnalysisLogger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analysis"])

# Degradations worth an error line; a missing credential is a deployment choice
_FAILURE_REASONS = frozenset({
    DegradedReason.UPSTREAM_TIMEOUT,
    DegradedReason.UPSTREAM_HTTP_ERROR,
    DegradedReason.UPSTREAM_CONNECTIVITY,
    DegradedReason.UPSTREAM_MALFORMED_BODY,
    DegradedReason.PARSE_DEGRADED,
})


def _preflight_headers(settings: Settings, origin: str | None) -> dict[str, str]:
    """CORS headers for a bare pre-flight, honouring CORS_ORIGINS."""
    headers = {
        k: v
        for k, v in CORS_HEADERS.items()
        if k != "Access-Control-Allow-Origin"
    }
    allowed = settings.allowed_origins
    if "*" in allowed:
        headers["Access-Control-Allow-Origin"] = "*"
    elif origin and origin in allowed:
        headers["Access-Control-Allow-Origin"] = origin
        headers["Vary"] = "Origin"
    return headers


@router.options("/analyze")
async def analyze_preflight(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Response:
    """Answer pre-flight even when no CORS headers were sent."""
    return Response(
        status_code=200,
        headers=_preflight_headers(settings, request.headers.get("origin")),
    )


@router.post("/analyze")
async def analyze(
    body: AnalyzeRequest,
    analyzer: ComplianceAnalyzer = Depends(get_analyzer),
    analysis_logger: AnalysisLogger = Depends(get_analysis_logger),
) -> JSONResponse:
    """Analyze one requirement against one document.

    Always 200 for well-formed input; ``simulated`` marks fallback
    verdicts so clients can show a trust indicator.
    """
    request_id = uuid.uuid4().hex[:12]
    start = time.perf_counter()

    result = await analyzer.analyze(body.requirement, body.document)

    analysis_logger.log_analysis(
        request_id=request_id,
        requirement_code=body.requirement.code,
        document_name=body.document.name,
        status=str(result.verdict.status),
        confidence=result.verdict.confidence,
        simulated=result.simulated,
        degraded_reason=(
            str(result.degraded_reason) if result.degraded_reason else None
        ),
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    if result.degraded_reason in _FAILURE_REASONS:
        analysis_logger.log_error(
            request_id=request_id,
            component="invoker",
            error=(
                f"{result.degraded_reason}: "
                f"{result.verdict.missing_elements[-1]}"
            ),
        )

    return JSONResponse(content=result.to_payload())


def _resolve_requirements(body: ReportRequest) -> list[Requirement]:
    if body.requirements is not None:
        return body.requirements
    if body.codes is not None:
        return [get_requirement(code) for code in body.codes]
    return list(load_catalogue())


@router.post("/report")
async def report(
    body: ReportRequest,
    analyzer: ComplianceAnalyzer = Depends(get_analyzer),
    settings: Settings = Depends(get_settings),
) -> APIResponse:
    """Score one document against many requirements."""
    try:
        requirements = _resolve_requirements(body)
    except KeyError as exc:
        return APIResponse(
            success=False,
            error=f"Unknown requirement code {exc.args[0]!r}",
        )

    compliance_report = await build_report(
        analyzer,
        requirements,
        body.document,
        max_concurrency=settings.report_max_concurrency,
    )
    return APIResponse(
        success=True,
        data=compliance_report.model_dump(mode="json", by_alias=True),
        metadata={
            "requirement_count": len(requirements),
            "simulated_count": compliance_report.simulated_count,
        },
    )
