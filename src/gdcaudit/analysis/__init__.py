"""Compliance analysis: prompt, model call, fallback, normalization."""

from gdcaudit.analysis.invoker import ModelReply, invoke_model
from gdcaudit.analysis.normalizer import NormalizedResponse, normalize_response
from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.analysis.prompts import build_compliance_prompt, render_response
from gdcaudit.analysis.schemas import (
    AnalysisResult,
    ComplianceRecord,
    ComplianceReport,
    Document,
    Requirement,
    Verdict,
)
from gdcaudit.analysis.scoring import build_report, score_requirement
from gdcaudit.analysis.simulation import (
    SimulationTable,
    load_simulation_table,
    simulate_response,
)

__all__ = [
    "AnalysisResult",
    "ComplianceAnalyzer",
    "ComplianceRecord",
    "ComplianceReport",
    "Document",
    "ModelReply",
    "NormalizedResponse",
    "Requirement",
    "SimulationTable",
    "Verdict",
    "build_compliance_prompt",
    "build_report",
    "invoke_model",
    "load_simulation_table",
    "normalize_response",
    "render_response",
    "score_requirement",
    "simulate_response",
]
