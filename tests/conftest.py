"""Shared test fixtures: sample inputs, mock model responses, app state."""

import os

# No real model calls from the test suite: the credential is cleared at
# import time, before any Settings() is created. Tests that exercise the
# model path pass a well-formed credential explicitly and patch the
# transport.
os.environ["ANTHROPIC_API_KEY"] = ""
os.environ["API_KEY"] = ""

from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI

from gdcaudit.analysis.orchestrator import ComplianceAnalyzer
from gdcaudit.analysis.schemas import Document, Requirement
from gdcaudit.config import AnalysisConfig, Settings
from gdcaudit.logger import AnalysisLogger
from gdcaudit.main import app

VALID_CREDENTIAL = "sk-ant-api03-" + "x" * 40

MODEL_TEXT = """\
STATUS: met
EVIDENCE: Governance committee minutes|Incident log reviewed monthly
MISSING_ELEMENTS: External audit schedule
RECOMMENDATIONS: Publish audit calendar|Add patient representative
CONFIDENCE: 91%"""


def make_requirement(**overrides: Any) -> Requirement:
    fields: dict[str, Any] = {
        "code": "GDC-3.1",
        "title": "Oversight of student practice",
        "description": "Providers must oversee student clinical activity",
        "domain": "Patient Protection",
        "criteria": ("X", "Y"),
    }
    fields.update(overrides)
    return Requirement(**fields)


def make_document(**overrides: Any) -> Document:
    fields: dict[str, Any] = {
        "name": "governance-policy.txt",
        "text_content": (
            "This policy describes clinical governance arrangements "
            "for the dental school."
        ),
    }
    fields.update(overrides)
    return Document(**fields)


def mock_response(content: Any, model: str = "claude-3-haiku-20240307") -> Any:
    """Build a mock litellm response with usage metadata."""
    msg = type("Msg", (), {"content": content})()
    choice = type("Choice", (), {"message": msg})()
    usage = type(
        "Usage",
        (),
        {"prompt_tokens": 120, "completion_tokens": 60},
    )()
    return type(
        "Response",
        (),
        {"choices": [choice], "usage": usage, "model": model},
    )()


def setup_test_app(
    tmp_path: Path,
    *,
    credential: str | None = None,
    api_key: str = "",
    cors_origins: str = "*",
    target: FastAPI = app,
) -> ComplianceAnalyzer:
    """Populate app.state the way the lifespan does.

    httpx's ASGITransport does not run the lifespan, so API test
    fixtures call this instead.
    """
    settings = Settings(
        anthropic_api_key=credential or "",
        api_key=api_key,
        cors_origins=cors_origins,
        log_dir=tmp_path / "logs",
    )
    analyzer = ComplianceAnalyzer(AnalysisConfig.from_settings(settings))
    target.state.settings = settings
    target.state.analyzer = analyzer
    target.state.logger = AnalysisLogger(
        log_dir=tmp_path / "logs", level="INFO"
    )
    return analyzer


@pytest.fixture
def requirement() -> Requirement:
    return make_requirement()


@pytest.fixture
def document() -> Document:
    return make_document()
