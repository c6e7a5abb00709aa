"""Decision workflow endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

from ..orchestrator import PipelineOrchestrator, list_stage_definitions
from ..report import render_report
from ..schemas import StageDefinition, StageProvenance, WorkflowRequest, WorkflowRunResponse


router = APIRouter(prefix="/workflow", tags=["workflow"])


@router.get("/health")
async def healthcheck() -> dict[str, str]:
    """Simple health check endpoint."""

    return {"status": "ok"}


@router.get("/stages", response_model=list[StageDefinition])
async def list_stages() -> list[StageDefinition]:
    """Expose stage agent metadata to the UI."""

    return list_stage_definitions()


@router.post("/run", response_model=WorkflowRunResponse)
async def run_workflow(payload: WorkflowRequest, request: Request) -> WorkflowRunResponse:
    """Run all four stages for the submitted request."""

    settings = request.app.state.settings
    # One orchestrator per request keeps runs isolated from each other.
    orchestrator = PipelineOrchestrator(
        request.app.state.generation_client,
        stage_delay=settings.stage_delay_seconds,
    )
    result = await orchestrator.run_pipeline(payload)

    return WorkflowRunResponse(
        request=payload,
        results=result,
        statuses=dict(orchestrator.statuses),
        provenance={
            stage: StageProvenance(source=outcome.source, reason=outcome.reason)
            for stage, outcome in orchestrator.outcomes.items()
        },
        combined_markdown=render_report(result),
    )
