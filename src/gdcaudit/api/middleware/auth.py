"""Optional service key on the HTTP API."""

from __future__ import annotations

import hmac
import logging

from fastapi import Request, Response
from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.responses import JSONResponse

from gdcaudit.api.schemas import APIResponse
from gdcaudit.constants import PUBLIC_PATH_PREFIXES

logger = logging.getLogger(__name__)


def _is_public(request: Request) -> bool:
    return request.method == "OPTIONS" or request.url.path.startswith(
        PUBLIC_PATH_PREFIXES
    )


class ApiKeyMiddleware(BaseHTTPMiddleware):
    """Require X-API-Key when ``Settings.api_key`` is set.

    Unrelated to the model credential, which never leaves the server.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        expected: str = request.app.state.settings.api_key
        if not expected or _is_public(request):
            return await call_next(request)

        provided = request.headers.get("X-API-Key", "")
        if hmac.compare_digest(provided, expected):
            return await call_next(request)

        logger.info(
            "event=api_key_rejected path=%s has_key=%s",
            request.url.path,
            bool(provided),
        )
        body = APIResponse(success=False, error="Invalid or missing API key")
        return JSONResponse(status_code=401, content=body.model_dump())
