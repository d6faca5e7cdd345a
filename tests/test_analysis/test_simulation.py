"""Tests for the simulation table loader and keyword selection."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from gdcaudit.analysis.normalizer import normalize_response
from gdcaudit.analysis.simulation import (
    load_simulation_table,
    read_simulation_table,
    simulate_response,
)
from gdcaudit.constants import ComplianceStatus


@pytest.fixture
def table_file(tmp_path: Path) -> Path:
    path = tmp_path / "simulations.yaml"
    path.write_text(
        dedent("""\
            default: fallback
            entries:
              - keyword: Alpha
                status: met
                confidence: 90
                evidence: [alpha evidence]
              - keyword: beta
                status: not-met
                confidence: 40
                evidence: [beta evidence]
              - keyword: fallback
                status: partially-met
                confidence: 70
                evidence: [fallback evidence]
        """)
    )
    return path


class TestReadSimulationTable:
    def test_loads_entries_in_order(self, table_file: Path) -> None:
        table = read_simulation_table(table_file)
        assert table.keywords == ("Alpha", "beta", "fallback")
        assert table.default.keyword == "fallback"

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            read_simulation_table(tmp_path / "nope.yaml")

    def test_unknown_default_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            "default: missing\n"
            "entries:\n"
            "  - keyword: a\n"
            "    status: met\n"
        )
        with pytest.raises(ValueError, match="matches no entry"):
            read_simulation_table(path)

    def test_invalid_status_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(
            "entries:\n"
            "  - keyword: a\n"
            "    status: excellent\n"
        )
        with pytest.raises(ValueError, match="Invalid verdict"):
            read_simulation_table(path)

    def test_empty_table_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("entries: []\n")
        with pytest.raises(ValueError, match="no entries"):
            read_simulation_table(path)


class TestSelect:
    def test_case_insensitive_substring(self, table_file: Path) -> None:
        table = read_simulation_table(table_file)
        assert table.select("... ALPHA ...").keyword == "Alpha"

    def test_first_match_in_table_order_wins(
        self, table_file: Path
    ) -> None:
        """Table order decides, not position in the prompt."""
        table = read_simulation_table(table_file)
        assert table.select("beta comes before alpha here").keyword == "Alpha"

    def test_no_match_uses_default(self, table_file: Path) -> None:
        table = read_simulation_table(table_file)
        assert table.select("nothing relevant").keyword == "fallback"


class TestBundledTable:
    def test_loaded_once(self) -> None:
        assert load_simulation_table() is load_simulation_table()

    def test_ships_five_domains(self) -> None:
        assert load_simulation_table().keywords == (
            "clinical governance",
            "curriculum alignment",
            "assessment strategy",
            "patient safety",
            "staffing",
        )

    def test_default_is_clinical_governance(self) -> None:
        assert load_simulation_table().default.keyword == "clinical governance"

    def test_response_is_parseable_grammar(self) -> None:
        text = simulate_response(
            "Review the staffing policy", load_simulation_table()
        )
        result = normalize_response(text)
        assert result.parse_failed is False
        assert result.issues == ()
        assert result.verdict.status == ComplianceStatus.PARTIALLY_MET
        assert result.verdict.confidence == 75
        assert "Staff qualification verification processes" in (
            result.verdict.evidence
        )

    def test_simulation_is_deterministic(self) -> None:
        table = load_simulation_table()
        prompt = "assessment strategy review"
        assert simulate_response(prompt, table) == simulate_response(
            prompt, table
        )
