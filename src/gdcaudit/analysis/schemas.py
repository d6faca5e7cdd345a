"""Pydantic models for requirements, documents, and verdicts."""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from gdcaudit.constants import (
    CONFIDENCE_MAX,
    CONFIDENCE_MIN,
    ComplianceStatus,
    DegradedReason,
    InspectionReadiness,
    PriorityLevel,
    RequirementCategory,
    RiskLevel,
)


class _Frozen(BaseModel):
    """Immutable model serialized with camelCase field names."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Requirement(_Frozen):
    """One GDC standard the document is checked against."""

    code: str = Field(min_length=1)
    title: str = Field(min_length=1)
    description: str = ""
    domain: str = ""
    criteria: tuple[str, ...] = ()
    category: RequirementCategory = RequirementCategory.STANDARD
    weight: int = 10


class Document(_Frozen):
    """A named document and its extracted text."""

    name: str = Field(min_length=1)
    text_content: str = ""


class Verdict(_Frozen):
    """Normalized compliance verdict for one (requirement, document) pair."""

    status: ComplianceStatus = ComplianceStatus.NOT_FOUND
    evidence: tuple[str, ...] = ()
    missing_elements: tuple[str, ...] = ()
    recommendations: tuple[str, ...] = ()
    confidence: int = Field(
        default=50, ge=CONFIDENCE_MIN, le=CONFIDENCE_MAX
    )
    document_references: tuple[str, ...] = ()
    gold_standard_practices: tuple[str, ...] = ()
    implementation_timeline: tuple[str, ...] = ()


class AnalysisResult(_Frozen):
    """Verdict plus provenance: model output or simulated fallback."""

    verdict: Verdict
    simulated: bool
    degraded_reason: DegradedReason | None = None
    model: str | None = None

    def to_payload(self) -> dict[str, object]:
        """Flat JSON body: verdict fields alongside provenance fields."""
        payload = self.verdict.model_dump(mode="json", by_alias=True)
        payload["simulated"] = self.simulated
        payload["degradedReason"] = (
            str(self.degraded_reason) if self.degraded_reason else None
        )
        payload["model"] = self.model
        return payload


class ComplianceRecord(_Frozen):
    """Scored verdict for a requirement inside a batch report."""

    requirement: Requirement
    result: AnalysisResult
    score: int
    inspection_readiness: InspectionReadiness
    priority_level: PriorityLevel
    risk_level: RiskLevel


class ComplianceReport(_Frozen):
    """Batch analysis of one document against many requirements."""

    document_name: str
    overall_score: int
    records: tuple[ComplianceRecord, ...] = ()
    inspection_readiness: InspectionReadiness = InspectionReadiness.NOT_READY
    critical_actions: tuple[str, ...] = ()
    simulated_count: int = 0

    @field_validator("overall_score")
    @classmethod
    def _bounded(cls, v: int) -> int:
        return max(0, min(100, v))
