"""Health check and credential status endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from gdcaudit import __version__
from gdcaudit.analysis.invoker import describe_credential
from gdcaudit.api.dependencies import get_settings
from gdcaudit.config import Settings

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/credential")
async def credential_status(
    settings: Settings = Depends(get_settings),
) -> dict[str, object]:
    """Whether the model credential is present and well-formed.

    Analysis still works without it (simulated verdicts), so a missing
    key reports ``degraded`` rather than an error status.
    """
    cred = describe_credential(settings.anthropic_api_key)
    return {
        "status": "healthy" if cred.well_formed else "degraded",
        "mode": "model" if cred.well_formed else "simulated",
        "anthropic": {
            "configured": cred.configured,
            "wellFormed": cred.well_formed,
            "keyPreview": cred.key_preview,
            "keyLength": cred.key_length,
        },
        "model": settings.model_identifier,
        "timestamp": datetime.now(UTC).isoformat(),
    }
