"""Prompt builders for the four decision agents."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Dict, Mapping

from .schemas import StageArtifact, StageKind


@dataclass(frozen=True)
class StagePrompt:
    """Static prompt material for a stage."""

    label: str
    header: str
    schema_example: str
    guidance: str = ""


STAGE_PROMPTS: Dict[StageKind, StagePrompt] = {
    StageKind.RESEARCH: StagePrompt(
        label="Research",
        header=(
            "You are a Market Research Agent. Analyze the following business scenario "
            "and provide structured output."
        ),
        schema_example="""{
  "marketSize": "estimated market size with numbers",
  "competitors": ["competitor1", "competitor2", "competitor3"],
  "trends": ["trend1", "trend2", "trend3"],
  "opportunities": ["opportunity1", "opportunity2", "opportunity3"],
  "confidence": 0.85
}""",
    ),
    StageKind.ANALYSIS: StagePrompt(
        label="Analysis",
        header=(
            "You are a Risk Analysis Agent. Based on the research data, provide risk "
            "and opportunity assessment."
        ),
        schema_example="""{
  "risks": ["risk1", "risk2", "risk3"],
  "opportunities": ["opportunity1", "opportunity2", "opportunity3"],
  "feasibilityScore": 0.75,
  "recommendations": ["recommendation1", "recommendation2"],
  "confidence": 0.80
}""",
    ),
    StageKind.STRATEGY: StagePrompt(
        label="Strategy",
        header=(
            "You are a Strategic Planning Agent. Create an actionable plan based on "
            "research and analysis."
        ),
        schema_example="""{
  "actionPlan": ["action1", "action2", "action3", "action4"],
  "timeline": "detailed timeline description",
  "budget": "budget breakdown and allocation",
  "kpis": ["kpi1", "kpi2", "kpi3"],
  "confidence": 0.85
}""",
    ),
    StageKind.VALIDATION: StagePrompt(
        label="Validation",
        header=(
            "You are a Quality Validation Agent. Review all previous agent outputs and "
            "provide final validation."
        ),
        schema_example="""{
  "validationScore": 0.85,
  "issues": ["issue1", "issue2"],
  "improvements": ["improvement1", "improvement2"],
  "finalRecommendation": "detailed final recommendation",
  "confidence": 0.90
}""",
        guidance="Validate the consistency, feasibility, and quality of the recommendations.",
    ),
}

JSON_ONLY_INSTRUCTION = "IMPORTANT: Respond ONLY with valid JSON. No additional text."


def serialize_artifact(artifact: StageArtifact) -> str:
    """Compact JSON used to embed an artifact in later prompts."""

    return json.dumps(artifact, ensure_ascii=False)


def build_stage_prompt(
    stage: StageKind,
    context: str,
    prior_artifacts: Mapping[StageKind, StageArtifact],
) -> str:
    """Assemble the prompt for ``stage``.

    Prior artifacts are embedded in stage order regardless of mapping order.
    """

    spec = STAGE_PROMPTS[stage]
    sections = [spec.header, f"Context:\n{context}"]
    for previous in StageKind.ordered():
        if previous in prior_artifacts:
            sections.append(f"{STAGE_PROMPTS[previous].label} Results: {serialize_artifact(prior_artifacts[previous])}")

    instruction = "Provide your response as a JSON object with this exact structure:"
    if spec.guidance:
        instruction = f"{spec.guidance} {instruction}"
    sections.append(f"{instruction}\n{spec.schema_example}")
    sections.append("All scores and confidence values are numbers between 0 and 1.")
    sections.append(JSON_ONLY_INSTRUCTION)
    return "\n\n".join(sections) + "\n"
