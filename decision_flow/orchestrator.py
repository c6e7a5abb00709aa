"""Sequential orchestration of the four decision stages."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from .context import build_context
from .errors import PipelineBusyError
from .llm import GenerationClient
from .runner import StageOutcome, run_stage_outcome
from .schemas import AgentStatus, StageArtifact, StageDefinition, StageKind, WorkflowRequest

logger = logging.getLogger(__name__)

WorkflowResult = Dict[StageKind, StageArtifact]

STAGE_AGENTS: Dict[StageKind, Tuple[str, str, str]] = {
    StageKind.RESEARCH: ("Research Agent", "Market & Industry Analysis", "🔍"),
    StageKind.ANALYSIS: ("Analysis Agent", "Risk & Opportunity Assessment", "📊"),
    StageKind.STRATEGY: ("Strategy Agent", "Action Plan Generation", "🎯"),
    StageKind.VALIDATION: ("Validation Agent", "Quality Assurance & Validation", "✅"),
}


def list_stage_definitions() -> List[StageDefinition]:
    """Return UI-friendly descriptors for all stage agents, in run order."""

    return [
        StageDefinition(id=stage, name=STAGE_AGENTS[stage][0], role=STAGE_AGENTS[stage][1], icon=STAGE_AGENTS[stage][2])
        for stage in StageKind.ordered()
    ]


class PipelineListener:
    """Observer for orchestrator events. Override the hooks you care about."""

    def stage_status_changed(self, stage: StageKind, status: AgentStatus) -> None:
        pass

    def run_completed(self, result: WorkflowResult) -> None:
        pass


class PipelineOrchestrator:
    """Drive Research → Analysis → Strategy → Validation for one run at a time.

    The instance owns the run state (context, statuses, accumulated artifacts
    and their provenance); ``reset`` clears it and each ``run_pipeline`` call
    starts from a reset. ``run_pipeline`` is not re-entrant.
    """

    def __init__(
        self,
        client: GenerationClient | None,
        *,
        stage_delay: float = 0.0,
        listeners: Optional[List[PipelineListener]] = None,
    ) -> None:
        if stage_delay < 0:
            raise ValueError("stage_delay must be >= 0")
        self.client = client
        self.stage_delay = stage_delay
        self._listeners: List[PipelineListener] = list(listeners or [])
        self._running = False
        self.context: str | None = None
        self.statuses: Dict[StageKind, AgentStatus] = {}
        self.outcomes: Dict[StageKind, StageOutcome] = {}
        self._artifacts: WorkflowResult = {}
        self._result: WorkflowResult | None = None
        self.reset()

    # ------------------------------------------------------------------
    # Listener management
    # ------------------------------------------------------------------

    def add_listener(self, listener: PipelineListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: PipelineListener) -> None:
        self._listeners.remove(listener)

    def _emit_status(self, stage: StageKind, status: AgentStatus) -> None:
        self.statuses[stage] = status
        for listener in list(self._listeners):
            listener.stage_status_changed(stage, status)

    def _emit_completed(self, result: WorkflowResult) -> None:
        for listener in list(self._listeners):
            listener.run_completed(result)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def result(self) -> WorkflowResult | None:
        """The full result, available only once the last stage completed."""

        return dict(self._result) if self._result is not None else None

    def reset(self) -> None:
        """Discard run state. Not allowed while a run is in flight."""

        if self._running:
            raise PipelineBusyError("cannot reset while a pipeline run is in progress")
        self.context = None
        self.statuses = {stage: AgentStatus.IDLE for stage in StageKind.ordered()}
        self.outcomes = {}
        self._artifacts = {}
        self._result = None

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def run_pipeline(self, request: WorkflowRequest) -> WorkflowResult:
        """Run every stage in order and return the artifacts keyed by stage."""

        if self._running:
            raise PipelineBusyError("a pipeline run is already in progress")
        self.reset()
        self._running = True
        try:
            stages = StageKind.ordered()
            for stage in stages:
                self._emit_status(stage, AgentStatus.IDLE)
            self.context = build_context(request)
            logger.info("Starting decision pipeline for goal %r", request.business_goal)

            for index, stage in enumerate(stages):
                self._emit_status(stage, AgentStatus.PROCESSING)
                outcome = await run_stage_outcome(stage, self.context, dict(self._artifacts), self.client)
                self.outcomes[stage] = outcome
                self._artifacts[stage] = outcome.artifact
                self._emit_status(stage, AgentStatus.COMPLETED)

                if self.stage_delay and index < len(stages) - 1:
                    await asyncio.sleep(self.stage_delay)

            self._result = dict(self._artifacts)
        finally:
            self._running = False

        fallbacks = [stage.value for stage, outcome in self.outcomes.items() if outcome.is_fallback]
        logger.info("Decision pipeline completed; fallback stages: %s", ", ".join(fallbacks) or "none")
        result = dict(self._result)
        self._emit_completed(result)
        return result
