"""Run a single stage: prompt, generate, parse, or fall back."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import FormatError, TransportError
from .fallbacks import fallback_for
from .llm import GenerationClient
from .parser import parse_artifact
from .prompts import build_stage_prompt
from .schemas import ArtifactSource, StageArtifact, StageKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageOutcome:
    """Result of one stage attempt, tagged with where the artifact came from."""

    stage: StageKind
    artifact: StageArtifact
    source: ArtifactSource
    reason: Optional[str] = None

    @classmethod
    def live(cls, stage: StageKind, artifact: StageArtifact) -> "StageOutcome":
        return cls(stage=stage, artifact=artifact, source=ArtifactSource.LIVE)

    @classmethod
    def fallback(cls, stage: StageKind, reason: str) -> "StageOutcome":
        return cls(stage=stage, artifact=fallback_for(stage), source=ArtifactSource.FALLBACK, reason=reason)

    @property
    def is_fallback(self) -> bool:
        return self.source is ArtifactSource.FALLBACK


async def run_stage_outcome(
    stage: StageKind,
    context: str,
    prior_artifacts: Mapping[StageKind, StageArtifact],
    client: GenerationClient | None,
) -> StageOutcome:
    """Execute ``stage`` and report provenance. Transport and format failures never escape."""

    if client is None:
        outcome = StageOutcome.fallback(stage, "no generation client configured")
        logger.warning("%s stage using fallback: %s", stage.value, outcome.reason)
        return outcome

    prompt = build_stage_prompt(stage, context, prior_artifacts)
    try:
        text = await client.generate(prompt)
        artifact = parse_artifact(stage, text)
    except TransportError as exc:
        outcome = StageOutcome.fallback(stage, f"transport error (status {exc.status}): {exc.details}")
    except FormatError as exc:
        outcome = StageOutcome.fallback(stage, f"format error: {exc}")
    except Exception as exc:
        logger.exception("%s stage generation failed unexpectedly", stage.value)
        outcome = StageOutcome.fallback(stage, f"unexpected error: {exc.__class__.__name__}: {exc}")
    else:
        logger.info("%s stage completed with live generation", stage.value)
        return StageOutcome.live(stage, artifact)

    logger.warning("%s stage using fallback: %s", stage.value, outcome.reason)
    return outcome


async def run_stage(
    stage: StageKind,
    context: str,
    prior_artifacts: Mapping[StageKind, StageArtifact],
    client: GenerationClient | None,
) -> StageArtifact:
    """Return a schema-valid artifact for ``stage``, live or fallback."""

    outcome = await run_stage_outcome(stage, context, prior_artifacts, client)
    return outcome.artifact
