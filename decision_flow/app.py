"""Application factory for the decision_flow FastAPI backend."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .llm import AnthropicGenerationClient, GenerationClient, build_anthropic_client, build_generation_client
from .routers import proxy, workflow


def create_app(
    settings: Settings | None = None,
    generation_client: GenerationClient | None = None,
    anthropic_client: AnthropicGenerationClient | None = None,
) -> FastAPI:
    """Create and configure a FastAPI application instance.

    ``generation_client`` feeds the workflow pipeline; ``anthropic_client``
    backs the ``/api/claude`` proxy route. Both default to clients built from
    ``settings``.
    """
    settings = settings or get_settings()
    app = FastAPI(
        title="Decision Flow Backend",
        version="0.1.0",
        description="Multi-agent business decision pipeline with resilient fallbacks.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials="*" not in settings.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings
    app.state.generation_client = generation_client or build_generation_client(settings)
    app.state.anthropic_client = anthropic_client or build_anthropic_client(settings)
    app.include_router(workflow.router)
    app.include_router(proxy.router)
    return app


app = create_app()
