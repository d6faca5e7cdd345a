"""Requirement scoring and batch compliance reports."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.analysis.schemas import (
    AnalysisResult,
    ComplianceRecord,
    ComplianceReport,
    Document,
    Requirement,
    Verdict,
)
from gdcaudit.constants import (
    CONFIDENCE_BONUS_MAX,
    CRITICAL_ACTION_SCORE_THRESHOLD,
    CRITICAL_CATEGORY_BONUS,
    DEFAULT_CONFIDENCE,
    FALLBACK_BASE_SCORE,
    MAX_CRITICAL_ACTIONS,
    PARTIAL_SCORE_THRESHOLD,
    READY_SCORE_THRESHOLD,
    SCORE_CEILING,
    SCORE_FLOOR,
    STATUS_BASE_SCORE,
    ComplianceStatus,
    InspectionReadiness,
    PriorityLevel,
    RequirementCategory,
    RiskLevel,
)

logger = logging.getLogger(__name__)


def score_requirement(requirement: Requirement, verdict: Verdict) -> int:
    """Status base score plus a confidence bonus, clamped to [20, 98]."""
    base = STATUS_BASE_SCORE.get(str(verdict.status), FALLBACK_BASE_SCORE)
    confidence_bonus = (
        (verdict.confidence - DEFAULT_CONFIDENCE)
        / DEFAULT_CONFIDENCE
        * CONFIDENCE_BONUS_MAX
    )
    category_bonus = (
        CRITICAL_CATEGORY_BONUS
        if requirement.category == RequirementCategory.CRITICAL
        else 0
    )
    raw = base + confidence_bonus + category_bonus
    return round(min(SCORE_CEILING, max(SCORE_FLOOR, raw)))


def inspection_readiness(verdict: Verdict) -> InspectionReadiness:
    if verdict.status == ComplianceStatus.MET:
        return InspectionReadiness.READY
    if verdict.status == ComplianceStatus.PARTIALLY_MET:
        return InspectionReadiness.PARTIAL
    return InspectionReadiness.NOT_READY


def priority_level(
    requirement: Requirement, verdict: Verdict
) -> PriorityLevel:
    if requirement.category == RequirementCategory.CRITICAL:
        return PriorityLevel.CRITICAL
    if verdict.status == ComplianceStatus.NOT_MET:
        return PriorityLevel.HIGH
    return PriorityLevel.MEDIUM


def risk_level(requirement: Requirement, verdict: Verdict) -> RiskLevel:
    if (
        requirement.category == RequirementCategory.CRITICAL
        and verdict.status != ComplianceStatus.MET
    ):
        return RiskLevel.HIGH
    if verdict.status == ComplianceStatus.NOT_MET:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def build_record(
    requirement: Requirement, result: AnalysisResult
) -> ComplianceRecord:
    verdict = result.verdict
    return ComplianceRecord(
        requirement=requirement,
        result=result,
        score=score_requirement(requirement, verdict),
        inspection_readiness=inspection_readiness(verdict),
        priority_level=priority_level(requirement, verdict),
        risk_level=risk_level(requirement, verdict),
    )


def _overall_readiness(
    overall_score: int, records: Sequence[ComplianceRecord]
) -> InspectionReadiness:
    critical_gap = any(
        r.requirement.category == RequirementCategory.CRITICAL
        and r.result.verdict.status == ComplianceStatus.NOT_MET
        for r in records
    )
    if overall_score >= READY_SCORE_THRESHOLD and not critical_gap:
        return InspectionReadiness.READY
    if overall_score >= PARTIAL_SCORE_THRESHOLD:
        return InspectionReadiness.PARTIAL
    return InspectionReadiness.NOT_READY


def _critical_actions(records: Sequence[ComplianceRecord]) -> list[str]:
    actions: list[str] = []
    for record in records:
        if len(actions) >= MAX_CRITICAL_ACTIONS:
            break
        if (
            record.requirement.category != RequirementCategory.CRITICAL
            or record.score >= CRITICAL_ACTION_SCORE_THRESHOLD
        ):
            continue
        recommendations = record.result.verdict.recommendations
        action = (
            recommendations[0]
            if recommendations
            else "Develop a compliance implementation plan"
        )
        actions.append(f"{record.requirement.code}: {action}")
    return actions


def summarize(
    document_name: str, records: Sequence[ComplianceRecord]
) -> ComplianceReport:
    """Aggregate records into a report, highest score first."""
    ordered = sorted(records, key=lambda r: r.score, reverse=True)
    overall = (
        round(sum(r.score for r in ordered) / len(ordered))
        if ordered
        else 0
    )
    # Critical actions read weakest-first
    weakest_first = sorted(ordered, key=lambda r: r.score)
    return ComplianceReport(
        document_name=document_name,
        overall_score=overall,
        records=tuple(ordered),
        inspection_readiness=_overall_readiness(overall, ordered),
        critical_actions=tuple(_critical_actions(weakest_first)),
        simulated_count=sum(1 for r in ordered if r.result.simulated),
    )


async def build_report(
    analyzer: ComplianceAnalyzer,
    requirements: Sequence[Requirement],
    document: Document,
    max_concurrency: int = 4,
) -> ComplianceReport:
    """Analyze every requirement against the document concurrently."""
    semaphore = asyncio.Semaphore(max_concurrency)

    async def run_one(requirement: Requirement) -> ComplianceRecord:
        async with semaphore:
            result = await analyzer.analyze(requirement, document)
        return build_record(requirement, result)

    records = await asyncio.gather(
        *(run_one(r) for r in requirements)
    )

    report = summarize(document.name, records)
    logger.info(
        "event=report_complete document=%s requirements=%d"
        " overall=%d simulated=%d",
        document.name,
        len(records),
        report.overall_score,
        report.simulated_count,
    )
    return report
