"""Per-requirement analysis: model call with simulated fallback."""

from __future__ import annotations

import logging

from gdcaudit.analysis.invoker import invoke_model
from gdcaudit.analysis.normalizer import normalize_response
from gdcaudit.analysis.prompts import build_compliance_prompt
from gdcaudit.analysis.schemas import (
    AnalysisResult,
    Document,
    Requirement,
    Verdict,
)
from gdcaudit.analysis.simulation import (
    SimulationTable,
    load_simulation_table,
    simulate_response,
)
from gdcaudit.config import AnalysisConfig
from gdcaudit.constants import DEGRADED_CONFIDENCE_CEILING, DegradedReason
from gdcaudit.resilience.errors import AnalysisError

logger = logging.getLogger(__name__)

# Explanations appended to degraded verdicts: (missing element, recommendation)
DEGRADED_NOTES: dict[DegradedReason, tuple[str, str]] = {
    DegradedReason.CREDENTIAL_MISSING: (
        "Live AI review not performed: no model credential is configured",
        "Set ANTHROPIC_API_KEY on the server to enable model-backed analysis",
    ),
    DegradedReason.CREDENTIAL_MALFORMED: (
        "Live AI review not performed: the configured model credential is malformed",
        "Replace ANTHROPIC_API_KEY with a valid key starting with 'sk-ant-'",
    ),
    DegradedReason.UPSTREAM_TIMEOUT: (
        "Model connectivity failure: the analysis request timed out",
        "Retry the analysis once model connectivity is restored",
    ),
    DegradedReason.UPSTREAM_HTTP_ERROR: (
        "Model connectivity failure: the model service returned an error",
        "Retry the analysis once model connectivity is restored",
    ),
    DegradedReason.UPSTREAM_CONNECTIVITY: (
        "Model connectivity failure: the model service could not be reached",
        "Retry the analysis once model connectivity is restored",
    ),
    DegradedReason.UPSTREAM_MALFORMED_BODY: (
        "Model connectivity failure: the model service returned an unusable response",
        "Retry the analysis once model connectivity is restored",
    ),
    DegradedReason.PARSE_DEGRADED: (
        "Model response could not be parsed into a verdict",
        "Re-run the analysis; review the document manually if this persists",
    ),
}


def degrade_verdict(verdict: Verdict, reason: DegradedReason) -> Verdict:
    """Cap confidence and record why the verdict is a fallback."""
    missing_note, recommendation_note = DEGRADED_NOTES[reason]
    return verdict.model_copy(
        update={
            "confidence": min(
                verdict.confidence, DEGRADED_CONFIDENCE_CEILING
            ),
            "missing_elements": (
                *verdict.missing_elements,
                missing_note,
            ),
            "recommendations": (
                *verdict.recommendations,
                recommendation_note,
            ),
        }
    )


class ComplianceAnalyzer:
    """Turns (requirement, document) pairs into verdicts.

    Holds only immutable configuration and the shared read-only
    simulation table, so one instance may serve concurrent calls.
    """

    def __init__(
        self,
        config: AnalysisConfig,
        table: SimulationTable | None = None,
    ) -> None:
        self._config = config
        self._table = table if table is not None else load_simulation_table()

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    async def analyze(
        self, requirement: Requirement, document: Document
    ) -> AnalysisResult:
        """Analyze one requirement against one document. Never raises.

        NoCredential / InvalidCredential go straight to simulation;
        a valid credential gets exactly one model call, and any failure
        of that call (or an unparseable reply) falls back to simulation.
        """
        prompt = build_compliance_prompt(
            requirement, document, self._config.excerpt_chars
        )

        try:
            reply = await invoke_model(prompt, self._config)
        except AnalysisError as exc:
            logger.warning(
                "event=analysis_degraded requirement=%s reason=%s detail=%s",
                requirement.code,
                exc.reason,
                exc,
            )
            return self._simulate(prompt, exc.reason)

        normalized = normalize_response(reply.text)
        if normalized.parse_failed:
            logger.warning(
                "event=analysis_degraded requirement=%s reason=%s",
                requirement.code,
                DegradedReason.PARSE_DEGRADED,
            )
            return self._simulate(prompt, DegradedReason.PARSE_DEGRADED)

        return AnalysisResult(
            verdict=normalized.verdict,
            simulated=False,
            model=reply.model,
        )

    def _simulate(
        self, prompt: str, reason: DegradedReason
    ) -> AnalysisResult:
        text = simulate_response(prompt, self._table)
        verdict = normalize_response(text).verdict
        return AnalysisResult(
            verdict=degrade_verdict(verdict, reason),
            simulated=True,
            degraded_reason=reason,
        )
