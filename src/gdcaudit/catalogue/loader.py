"""Load and validate the bundled GDC requirement catalogue."""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gdcaudit.analysis.schemas import Requirement

_CATALOGUE_PATH = (
    Path(__file__).resolve().parent.parent / "data" / "requirements.yaml"
)


def read_catalogue(path: Path) -> tuple[Requirement, ...]:
    """Read requirements from ``path``.

    Raises ``FileNotFoundError`` if the file doesn't exist and
    ``ValueError`` for a malformed entry or a duplicated code.
    """
    if not path.exists():
        msg = f"Requirement catalogue not found: {path}"
        raise FileNotFoundError(msg)

    raw: dict[str, Any] = yaml.safe_load(path.read_text(encoding="utf-8")) or {}

    requirements: list[Requirement] = []
    seen: set[str] = set()
    for i, item in enumerate(raw.get("requirements", [])):
        try:
            requirement = Requirement(**item)
        except (TypeError, ValidationError) as exc:
            msg = f"Invalid requirement at index {i} in {path.name}: {exc}"
            raise ValueError(msg) from exc
        if requirement.code in seen:
            msg = f"Duplicate requirement code '{requirement.code}'"
            raise ValueError(msg)
        seen.add(requirement.code)
        requirements.append(requirement)

    return tuple(requirements)


@functools.cache
def load_catalogue() -> tuple[Requirement, ...]:
    """The bundled catalogue, read once per process."""
    return read_catalogue(_CATALOGUE_PATH)


def get_requirement(
    code: str, catalogue: tuple[Requirement, ...] | None = None
) -> Requirement:
    """Look up a requirement by code (case-insensitive).

    Raises ``KeyError`` for an unknown code.
    """
    if catalogue is None:
        catalogue = load_catalogue()
    for requirement in catalogue:
        if requirement.code.lower() == code.strip().lower():
            return requirement
    raise KeyError(code)
