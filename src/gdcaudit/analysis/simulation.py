"""Keyword-matched canned verdicts for when the model is unavailable."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gdcaudit.analysis.prompts import render_response
from gdcaudit.analysis.schemas import Verdict

_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_TABLE_PATH = _DATA_DIR / "simulations.yaml"

_VERDICT_FIELDS = (
    "status",
    "confidence",
    "evidence",
    "missing_elements",
    "recommendations",
    "document_references",
    "gold_standard_practices",
    "implementation_timeline",
)


@dataclass(frozen=True)
class SimulationEntry:
    """One keyword and the verdict served when it matches."""

    keyword: str
    verdict: Verdict


@dataclass(frozen=True)
class SimulationTable:
    """Ordered keyword table with a designated default entry."""

    entries: tuple[SimulationEntry, ...]
    default: SimulationEntry
    keywords: tuple[str, ...] = field(default_factory=tuple)

    def select(self, prompt: str) -> SimulationEntry:
        """First entry whose keyword occurs in the prompt, else the default."""
        haystack = prompt.lower()
        for entry in self.entries:
            if entry.keyword.lower() in haystack:
                return entry
        return self.default


def parse_simulation_table(raw: dict[str, Any]) -> SimulationTable:
    """Build a table from its YAML mapping.

    Raises ``ValueError`` for an empty table, a malformed entry, or a
    ``default`` that names no entry.
    """
    raw_entries = raw.get("entries") or []
    if not raw_entries:
        raise ValueError("Simulation table has no entries")

    entries: list[SimulationEntry] = []
    for i, item in enumerate(raw_entries):
        keyword = str(item.get("keyword", "")).strip()
        if not keyword:
            raise ValueError(f"Simulation entry {i} has no keyword")
        try:
            verdict = Verdict(
                **{k: item[k] for k in _VERDICT_FIELDS if k in item}
            )
        except ValidationError as exc:
            msg = f"Invalid verdict in simulation entry '{keyword}': {exc}"
            raise ValueError(msg) from exc
        entries.append(SimulationEntry(keyword=keyword, verdict=verdict))

    default_keyword = str(raw.get("default", entries[0].keyword))
    default = next(
        (e for e in entries if e.keyword == default_keyword), None
    )
    if default is None:
        msg = (
            f"Simulation default '{default_keyword}' matches no entry. "
            f"Known: {[e.keyword for e in entries]}"
        )
        raise ValueError(msg)

    return SimulationTable(
        entries=tuple(entries),
        default=default,
        keywords=tuple(e.keyword for e in entries),
    )


def read_simulation_table(path: Path) -> SimulationTable:
    """Read and validate a simulation table file."""
    if not path.exists():
        msg = f"Simulation table not found: {path}"
        raise FileNotFoundError(msg)
    raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8"))
    return parse_simulation_table(raw or {})


@functools.cache
def load_simulation_table() -> SimulationTable:
    """The bundled table, read once per process."""
    return read_simulation_table(DEFAULT_TABLE_PATH)


def simulate_verdict(prompt: str, table: SimulationTable) -> Verdict:
    return table.select(prompt).verdict


def simulate_response(prompt: str, table: SimulationTable) -> str:
    """Grammar-formatted text for the entry the prompt selects."""
    return render_response(simulate_verdict(prompt, table))
