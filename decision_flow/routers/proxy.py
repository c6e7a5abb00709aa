"""Thin reverse proxy that forwards prompts to the Anthropic Messages API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from ..errors import TransportError
from ..schemas import ProxyRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["proxy"])


@router.post("/claude")
async def forward_prompt(payload: ProxyRequest, request: Request) -> JSONResponse:
    """Forward ``prompt`` and return the provider's raw JSON response."""

    client = request.app.state.anthropic_client
    try:
        data = await client.create_message(payload.prompt)
    except TransportError as exc:
        if exc.status:
            logger.error("Claude API error %s: %s", exc.status, exc.details)
            return JSONResponse(status_code=exc.status, content={"error": "Claude API error", "details": exc.details})
        logger.error("Proxy error: %s", exc.details)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "message": str(exc.details)},
        )
    except Exception as exc:
        logger.exception("Proxy error")
        return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})
    return JSONResponse(status_code=200, content=data)


@router.api_route("/test", methods=["GET", "POST"])
async def api_test(request: Request) -> dict[str, Any]:
    """Report that the API is reachable and whether a provider key is set."""

    return {
        "message": "API is working!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "hasApiKey": request.app.state.anthropic_client.has_api_key,
        "method": request.method,
    }
