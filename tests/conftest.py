from __future__ import annotations

import json
from typing import Dict, List, Tuple, Union

import pytest

from decision_flow.errors import TransportError
from decision_flow.orchestrator import PipelineListener
from decision_flow.prompts import STAGE_PROMPTS
from decision_flow.schemas import AgentStatus, StageKind, WorkflowRequest

Reply = Union[str, Exception]


def stage_for_prompt(prompt: str) -> StageKind:
    for stage, spec in STAGE_PROMPTS.items():
        if prompt.startswith(spec.header):
            return stage
    raise AssertionError(f"prompt does not start with a known stage header: {prompt[:80]!r}")


class StubGenerationClient:
    """Scripted generation client keyed by the stage a prompt belongs to."""

    def __init__(self, replies: Dict[StageKind, Reply] | None = None, default: Reply | None = None) -> None:
        self.replies = dict(replies or {})
        self.default = default if default is not None else TransportError(500, {"error": "stubbed failure"})
        self.prompts: List[str] = []

    @property
    def stages_called(self) -> List[StageKind]:
        return [stage_for_prompt(prompt) for prompt in self.prompts]

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.get(stage_for_prompt(prompt), self.default)
        if isinstance(reply, Exception):
            raise reply
        return reply


class RecordingListener(PipelineListener):
    def __init__(self) -> None:
        self.events: List[Tuple[StageKind, AgentStatus]] = []
        self.completed: list = []

    def stage_status_changed(self, stage: StageKind, status: AgentStatus) -> None:
        self.events.append((stage, status))

    def run_completed(self, result) -> None:
        self.completed.append(result)


LIVE_RESEARCH = {
    "marketSize": "$1B",
    "competitors": ["A"],
    "trends": ["B"],
    "opportunities": ["C"],
    "confidence": 0.9,
}


@pytest.fixture
def sample_request() -> WorkflowRequest:
    return WorkflowRequest(
        businessGoal="Launch support bot",
        industry="SaaS",
        budget="€100K",
        timeline="6 months",
        constraints="small team",
    )


@pytest.fixture
def live_research_text() -> str:
    return f"```json\n{json.dumps(LIVE_RESEARCH)}\n```"
