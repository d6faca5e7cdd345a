"""Requirement catalogue API routes."""

from __future__ import annotations

from fastapi import APIRouter

from gdcaudit.api.schemas import APIResponse
from gdcaudit.catalogue import get_requirement, load_catalogue

router = APIRouter(prefix="/api/requirements", tags=["requirements"])


@router.get("")
async def list_requirements() -> APIResponse:
    """List every bundled requirement."""
    catalogue = load_catalogue()
    return APIResponse(
        success=True,
        data=[r.model_dump(mode="json", by_alias=True) for r in catalogue],
        metadata={"count": len(catalogue)},
    )


@router.get("/{code}")
async def get_requirement_detail(code: str) -> APIResponse:
    try:
        requirement = get_requirement(code)
    except KeyError:
        return APIResponse(
            success=False,
            error=f"Requirement '{code}' not found",
        )
    return APIResponse(
        success=True,
        data=requirement.model_dump(mode="json", by_alias=True),
    )
