"""FastAPI application with lifespan startup."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

# Logging first: the analysis package pulls in litellm, which reads
# LITELLM_LOG at import time
from gdcaudit.logging_config import setup_logging

setup_logging()

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402

from gdcaudit import __version__  # noqa: E402
from gdcaudit.analysis.invoker import describe_credential  # noqa: E402
from gdcaudit.analysis.orchestrator import ComplianceAnalyzer  # noqa: E402
from gdcaudit.analysis.simulation import load_simulation_table  # noqa: E402
from gdcaudit.api.middleware.auth import ApiKeyMiddleware  # noqa: E402
from gdcaudit.api.routes import analysis, health, requirements  # noqa: E402
from gdcaudit.catalogue import load_catalogue  # noqa: E402
from gdcaudit.config import AnalysisConfig, Settings  # noqa: E402
from gdcaudit.logger import AnalysisLogger  # noqa: E402
from gdcaudit.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)

cleanup_third_party_handlers()

_logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings: Settings = app.state.settings

    # Declarative tables load once; immutable for the process lifetime
    table = load_simulation_table()
    catalogue = load_catalogue()

    app.state.analyzer = ComplianceAnalyzer(
        AnalysisConfig.from_settings(settings), table
    )
    app.state.logger = AnalysisLogger(
        log_dir=settings.log_dir, level=settings.log_level
    )

    cred = describe_credential(settings.anthropic_api_key)
    if not cred.well_formed:
        _logger.warning(
            "event=simulation_mode configured=%s well_formed=%s",
            cred.configured,
            cred.well_formed,
        )
    if not settings.api_key:
        _logger.warning(
            "event=no_api_key action=all_endpoints_public"
        )
    _logger.info(
        "event=startup simulations=%d requirements=%d model=%s origins=%s",
        len(table.entries),
        len(catalogue),
        settings.model_identifier,
        ",".join(settings.allowed_origins),
    )

    yield


def build_app(settings: Settings) -> FastAPI:
    """Assemble the API for one set of settings."""
    application = FastAPI(
        title="gdcaudit",
        description=(
            "GDC accreditation compliance analysis with"
            " simulated fallback when the model is unavailable"
        ),
        version=__version__,
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )
    application.state.settings = settings

    # Starlette runs the last-added middleware first: CORS answers
    # pre-flight before ApiKeyMiddleware can reject it
    application.add_middleware(ApiKeyMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-API-Key"],
        allow_credentials=False,
    )

    application.include_router(health.router)
    application.include_router(analysis.router)
    application.include_router(requirements.router)
    return application


app = build_app(Settings())
