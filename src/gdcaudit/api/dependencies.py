"""FastAPI dependency injection for app-scoped services."""

from __future__ import annotations

from fastapi import Request

from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.config import Settings
from gdcaudit.logger import AnalysisLogger


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_analyzer(request: Request) -> ComplianceAnalyzer:
    """Analyzer built once at startup from the server-held credential."""
    return request.app.state.analyzer


def get_analysis_logger(request: Request) -> AnalysisLogger:
    return request.app.state.logger
