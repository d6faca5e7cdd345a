"""Bundled GDC requirement catalogue."""

from gdcaudit.catalogue.loader import (
    get_requirement,
    load_catalogue,
    read_catalogue,
)

__all__ = ["get_requirement", "load_catalogue", "read_catalogue"]
