"""Tests for prompt building and grammar rendering."""

from __future__ import annotations

import itertools

import pytest

from gdcaudit.analysis.normalizer import normalize_response
from gdcaudit.analysis.prompts import (
    RESPONSE_GRAMMAR,
    build_compliance_prompt,
    render_response,
)
from gdcaudit.analysis.schemas import Document, Requirement, Verdict
from gdcaudit.analysis.simulation import load_simulation_table
from gdcaudit.constants import ComplianceStatus
from tests.conftest import make_document


class TestBuildCompliancePrompt:
    def test_embeds_requirement_and_document(
        self, requirement: Requirement, document: Document
    ) -> None:
        prompt = build_compliance_prompt(requirement, document)
        assert "- Code: GDC-3.1" in prompt
        assert "- Title: Oversight of student practice" in prompt
        assert "- Criteria: X; Y" in prompt
        assert "- File: governance-policy.txt" in prompt
        assert document.text_content in prompt

    def test_states_grammar_verbatim(
        self, requirement: Requirement, document: Document
    ) -> None:
        prompt = build_compliance_prompt(requirement, document)
        assert RESPONSE_GRAMMAR in prompt
        for label in ("STATUS:", "EVIDENCE:", "MISSING_ELEMENTS:",
                      "RECOMMENDATIONS:", "CONFIDENCE:"):
            assert label in prompt

    def test_truncates_document_text(
        self, requirement: Requirement
    ) -> None:
        doc = make_document(text_content="A" * 2500 + "B" * 2500)
        prompt = build_compliance_prompt(requirement, doc)
        assert "A" * 2500 + "B" * 500 in prompt
        assert "B" * 501 not in prompt

    def test_custom_excerpt_length(self, requirement: Requirement) -> None:
        doc = make_document(text_content="0123456789")
        prompt = build_compliance_prompt(requirement, doc, excerpt_chars=4)
        assert "Content Sample: 0123\n" in prompt

    def test_deterministic(
        self, requirement: Requirement, document: Document
    ) -> None:
        assert build_compliance_prompt(
            requirement, document
        ) == build_compliance_prompt(requirement, document)

    def test_instruction_text_has_no_simulation_keywords(self) -> None:
        """Fallback selection must only react to caller content."""
        bare = build_compliance_prompt(
            Requirement(code="C", title="T"),
            Document(name="d.txt"),
        ).lower()
        for keyword in load_simulation_table().keywords:
            assert keyword.lower() not in bare


_OPTIONAL_FIELDS = (
    "document_references",
    "gold_standard_practices",
    "implementation_timeline",
)


class TestRenderRoundTrip:
    @pytest.mark.parametrize("status", list(ComplianceStatus))
    def test_core_fields_survive(self, status: ComplianceStatus) -> None:
        verdict = Verdict(
            status=status,
            evidence=("Minutes 2024", "Audit log"),
            missing_elements=("Patient feedback loop",),
            recommendations=("Schedule audits",),
            confidence=67,
        )
        assert normalize_response(render_response(verdict)).verdict == verdict

    @pytest.mark.parametrize(
        "populated",
        [
            combo
            for n in range(len(_OPTIONAL_FIELDS) + 1)
            for combo in itertools.combinations(_OPTIONAL_FIELDS, n)
        ],
    )
    def test_optional_field_combinations_survive(
        self, populated: tuple[str, ...]
    ) -> None:
        extras = {name: (f"{name} one", f"{name} two") for name in populated}
        verdict = Verdict(
            status=ComplianceStatus.PARTIALLY_MET,
            evidence=("e1",),
            confidence=73,
            **extras,
        )
        assert normalize_response(render_response(verdict)).verdict == verdict

    def test_omits_empty_optional_blocks(self) -> None:
        text = render_response(Verdict(status=ComplianceStatus.MET))
        assert "DOCUMENT_REFERENCES" not in text
        assert "CONFIDENCE: 50%" in text
