"""Pydantic models and enums for the business decision workflow."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field, StrictStr

StageArtifact = Dict[str, Any]

Score = Annotated[float, Field(strict=True, ge=0.0, le=1.0, allow_inf_nan=False)]


class StageKind(str, Enum):
    """Enumerate the pipeline stages in execution order."""

    RESEARCH = "research"
    ANALYSIS = "analysis"
    STRATEGY = "strategy"
    VALIDATION = "validation"

    @property
    def order(self) -> int:
        """Return a human-friendly order index for the stage."""
        stage_order = {
            StageKind.RESEARCH: 1,
            StageKind.ANALYSIS: 2,
            StageKind.STRATEGY: 3,
            StageKind.VALIDATION: 4,
        }
        return stage_order[self]

    @classmethod
    def ordered(cls) -> List["StageKind"]:
        return sorted(cls, key=lambda stage: stage.order)


class AgentStatus(str, Enum):
    """Lifecycle of a stage within one run."""

    IDLE = "idle"
    PROCESSING = "processing"
    COMPLETED = "completed"


class ArtifactSource(str, Enum):
    """Where a stage artifact came from."""

    LIVE = "live"
    FALLBACK = "fallback"


class WorkflowRequest(BaseModel):
    """User supplied inputs for a decision run. Empty strings are allowed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    business_goal: str = Field(default="", alias="businessGoal", description="What the business wants to achieve.")
    industry: str = Field(default="", description="Industry or market the goal applies to.")
    budget: str = Field(default="", description="Available budget, free text.")
    timeline: str = Field(default="", description="Target timeline, free text.")
    constraints: str = Field(default="", description="Known constraints such as team size or regulation.")


# ---------------------------------------------------------------------------
# Stage artifact schemas
# ---------------------------------------------------------------------------


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ResearchArtifact(_ArtifactModel):
    """Market & industry analysis."""

    marketSize: StrictStr
    competitors: List[StrictStr] = Field(default_factory=list)
    trends: List[StrictStr] = Field(default_factory=list)
    opportunities: List[StrictStr] = Field(default_factory=list)
    confidence: Score


class AnalysisArtifact(_ArtifactModel):
    """Risk & opportunity assessment."""

    risks: List[StrictStr] = Field(default_factory=list)
    opportunities: List[StrictStr] = Field(default_factory=list)
    feasibilityScore: Score
    recommendations: List[StrictStr] = Field(default_factory=list)
    confidence: Score


class StrategyArtifact(_ArtifactModel):
    """Action plan generation."""

    actionPlan: List[StrictStr] = Field(default_factory=list)
    timeline: StrictStr
    budget: StrictStr
    kpis: List[StrictStr] = Field(default_factory=list)
    confidence: Score


class ValidationArtifact(_ArtifactModel):
    """Quality assurance & validation."""

    validationScore: Score
    issues: List[StrictStr] = Field(default_factory=list)
    improvements: List[StrictStr] = Field(default_factory=list)
    finalRecommendation: StrictStr
    confidence: Score


STAGE_MODELS: Dict[StageKind, Type[_ArtifactModel]] = {
    StageKind.RESEARCH: ResearchArtifact,
    StageKind.ANALYSIS: AnalysisArtifact,
    StageKind.STRATEGY: StrategyArtifact,
    StageKind.VALIDATION: ValidationArtifact,
}


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------


class StageDefinition(BaseModel):
    """Expose metadata that describes a stage agent to the UI."""

    id: StageKind
    name: str
    role: str
    icon: str


class StageProvenance(BaseModel):
    """Report whether a stage used live generation or its fallback."""

    source: ArtifactSource
    reason: Optional[str] = None


class WorkflowRunResponse(BaseModel):
    """Aggregate the stage results of a completed run."""

    request: WorkflowRequest
    results: Dict[StageKind, Dict[str, Any]]
    statuses: Dict[StageKind, AgentStatus]
    provenance: Dict[StageKind, StageProvenance]
    combined_markdown: str


class ProxyRequest(BaseModel):
    """Body accepted by the generation proxy route."""

    prompt: str = Field(..., min_length=1)
