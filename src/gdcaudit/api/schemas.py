"""Request/response schemas for the HTTP API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gdcaudit.analysis.schemas import Document, Requirement


class APIResponse(BaseModel):
    """Standard response envelope for catalogue and report endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class AnalyzeRequest(BaseModel):
    """Request body for POST /api/analyze."""

    requirement: Requirement
    document: Document


class ReportRequest(BaseModel):
    """Request body for POST /api/report.

    Explicit ``requirements`` win; otherwise ``codes`` select from the
    bundled catalogue; with neither, the whole catalogue is used. An
    empty list is rejected rather than read as "no selection".
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document: Document
    requirements: list[Requirement] | None = Field(default=None, min_length=1)
    codes: list[str] | None = Field(default=None, min_length=1)

