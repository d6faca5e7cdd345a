"""Tests for the response normalizer."""

from __future__ import annotations

from gdcaudit.analysis.normalizer import (
    normalize_response,
    parse_confidence,
    parse_list,
    parse_status,
)
from gdcaudit.constants import DEFAULT_CONFIDENCE, ComplianceStatus
from tests.conftest import MODEL_TEXT


class TestNormalizeResponse:
    def test_well_formed_response(self) -> None:
        result = normalize_response(MODEL_TEXT)
        verdict = result.verdict
        assert verdict.status == ComplianceStatus.MET
        assert verdict.evidence == (
            "Governance committee minutes",
            "Incident log reviewed monthly",
        )
        assert verdict.missing_elements == ("External audit schedule",)
        assert verdict.recommendations == (
            "Publish audit calendar",
            "Add patient representative",
        )
        assert verdict.confidence == 91
        assert result.issues == ()
        assert result.parse_failed is False

    def test_missing_confidence_defaults_to_fifty(self) -> None:
        result = normalize_response("STATUS: not-met\nEVIDENCE: a|b")
        assert result.verdict.confidence == DEFAULT_CONFIDENCE == 50
        assert "missing CONFIDENCE block" in result.issues

    def test_unreadable_confidence_defaults(self) -> None:
        result = normalize_response("STATUS: met\nCONFIDENCE: high")
        assert result.verdict.confidence == 50
        assert "unreadable CONFIDENCE block" in result.issues

    def test_confidence_above_range_clamped(self) -> None:
        result = normalize_response("STATUS: met\nCONFIDENCE: 137%")
        assert result.verdict.confidence == 100

    def test_negative_confidence_clamped(self) -> None:
        result = normalize_response("STATUS: met\nCONFIDENCE: -12%")
        assert result.verdict.confidence == 0

    def test_oversized_confidence_clamped_without_error(self) -> None:
        result = normalize_response(
            "STATUS: met\nCONFIDENCE: " + "9" * 400 + "%"
        )
        assert result.verdict.confidence == 100
        assert result.issues == ()

    def test_oversized_negative_confidence_clamped(self) -> None:
        assert parse_confidence("-" + "9" * 400) == 0

    def test_unknown_status_maps_to_not_found(self) -> None:
        result = normalize_response("STATUS: mostly fine\nCONFIDENCE: 70%")
        assert result.verdict.status == ComplianceStatus.NOT_FOUND
        assert result.parse_failed is False
        assert any("unrecognised status" in i for i in result.issues)

    def test_missing_optional_blocks_are_empty(self) -> None:
        result = normalize_response("STATUS: partially-met\nCONFIDENCE: 64")
        verdict = result.verdict
        assert verdict.evidence == ()
        assert verdict.missing_elements == ()
        assert verdict.recommendations == ()
        assert verdict.document_references == ()
        assert verdict.gold_standard_practices == ()
        assert verdict.implementation_timeline == ()

    def test_evidence_found_synonym_on_next_line(self) -> None:
        text = (
            "STATUS: partially-met\n"
            "CONFIDENCE: 82%\n"
            "EVIDENCE_FOUND:\n"
            "Policy v2.1|Risk protocols\n"
            "MISSING_ELEMENTS:\n"
            "Audit programme\n"
            "GOLD_STANDARD_PRACTICES:\n"
            "Regular audit cycles"
        )
        verdict = normalize_response(text).verdict
        assert verdict.evidence == ("Policy v2.1", "Risk protocols")
        assert verdict.missing_elements == ("Audit programme",)
        assert verdict.gold_standard_practices == ("Regular audit cycles",)

    def test_empty_label_does_not_swallow_next_label(self) -> None:
        text = "STATUS: met\nEVIDENCE:\nMISSING_ELEMENTS: gap"
        verdict = normalize_response(text).verdict
        assert verdict.evidence == ()
        assert verdict.missing_elements == ("gap",)

    def test_surrounding_prose_and_markdown_tolerated(self) -> None:
        text = (
            "Here is my analysis.\n\n"
            "**STATUS:** not-met\n"
            "**CONFIDENCE:** 55%\n"
            "Thanks!"
        )
        verdict = normalize_response(text).verdict
        assert verdict.status == ComplianceStatus.NOT_MET
        assert verdict.confidence == 55

    def test_unparseable_text_flags_parse_failure(self) -> None:
        result = normalize_response("I cannot help with that.")
        assert result.parse_failed is True
        assert result.verdict.status == ComplianceStatus.NOT_FOUND
        assert result.verdict.confidence == 50

    def test_empty_text_never_raises(self) -> None:
        result = normalize_response("")
        assert result.parse_failed is True


class TestFieldParsers:
    def test_parse_list_strips_brackets_and_blanks(self) -> None:
        assert parse_list("[a | b || c ]") == ("a", "b", "c")

    def test_parse_status_tolerates_case_and_brackets(self) -> None:
        assert parse_status("[Partially-Met]") == ComplianceStatus.PARTIALLY_MET
        assert parse_status("NOT MET") == ComplianceStatus.NOT_MET
        assert parse_status("unknown") is None

    def test_parse_confidence_rounds_decimals(self) -> None:
        assert parse_confidence("72.6%") == 73
        assert parse_confidence("n/a") is None
