"""Markdown rendering of stage artifacts for the UI."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, Mapping

from .schemas import StageArtifact, StageKind


def _bullet_list(items: Iterable[str]) -> str:
    return "\n".join(f"- {item}" for item in items if item)


def _percent(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value * 100:.0f}%"
    return ""


def _join_sections(sections: Iterable[str]) -> str:
    return "\n\n".join(section for section in sections if section)


def _format_research_markdown(data: StageArtifact) -> str:
    return _join_sections(
        [
            f"## Market Size\n\n{data.get('marketSize', '')}" if data.get("marketSize") else "",
            f"## Competitors\n\n{_bullet_list(data.get('competitors', []))}" if data.get("competitors") else "",
            f"## Trends\n\n{_bullet_list(data.get('trends', []))}" if data.get("trends") else "",
            f"## Opportunities\n\n{_bullet_list(data.get('opportunities', []))}" if data.get("opportunities") else "",
        ]
    )


def _format_analysis_markdown(data: StageArtifact) -> str:
    feasibility = _percent(data.get("feasibilityScore"))
    return _join_sections(
        [
            f"## Feasibility Score\n\n{feasibility}" if feasibility else "",
            f"## Risks\n\n{_bullet_list(data.get('risks', []))}" if data.get("risks") else "",
            f"## Opportunities\n\n{_bullet_list(data.get('opportunities', []))}" if data.get("opportunities") else "",
            f"## Recommendations\n\n{_bullet_list(data.get('recommendations', []))}"
            if data.get("recommendations")
            else "",
        ]
    )


def _format_strategy_markdown(data: StageArtifact) -> str:
    return _join_sections(
        [
            f"## Action Plan\n\n{_bullet_list(data.get('actionPlan', []))}" if data.get("actionPlan") else "",
            f"## Timeline\n\n{data.get('timeline', '')}" if data.get("timeline") else "",
            f"## Budget\n\n{data.get('budget', '')}" if data.get("budget") else "",
            f"## KPIs\n\n{_bullet_list(data.get('kpis', []))}" if data.get("kpis") else "",
        ]
    )


def _format_validation_markdown(data: StageArtifact) -> str:
    score = _percent(data.get("validationScore"))
    return _join_sections(
        [
            f"## Validation Score\n\n{score}" if score else "",
            f"## Final Recommendation\n\n{data.get('finalRecommendation', '')}"
            if data.get("finalRecommendation")
            else "",
            f"## Issues\n\n{_bullet_list(data.get('issues', []))}" if data.get("issues") else "",
            f"## Improvements\n\n{_bullet_list(data.get('improvements', []))}" if data.get("improvements") else "",
        ]
    )


STAGE_TITLES: Dict[StageKind, str] = {
    StageKind.RESEARCH: "Research Agent: Market & Industry Analysis",
    StageKind.ANALYSIS: "Analysis Agent: Risk & Opportunity Assessment",
    StageKind.STRATEGY: "Strategy Agent: Action Plan Generation",
    StageKind.VALIDATION: "Validation Agent: Quality Assurance & Validation",
}

FORMATTERS: Dict[StageKind, Callable[[StageArtifact], str]] = {
    StageKind.RESEARCH: _format_research_markdown,
    StageKind.ANALYSIS: _format_analysis_markdown,
    StageKind.STRATEGY: _format_strategy_markdown,
    StageKind.VALIDATION: _format_validation_markdown,
}


def render_stage_markdown(stage: StageKind, artifact: StageArtifact) -> str:
    """Render one artifact under a heading with its confidence."""

    body = FORMATTERS[stage](artifact)
    confidence = _percent(artifact.get("confidence"))
    heading = f"# {STAGE_TITLES[stage]}"
    if confidence:
        heading = f"{heading}\n\n*Confidence:* {confidence}"
    return _join_sections([heading, body])


def render_report(result: Mapping[StageKind, StageArtifact]) -> str:
    """Concatenate stage markdown in stage order."""

    return "\n\n---\n\n".join(
        render_stage_markdown(stage, result[stage]) for stage in StageKind.ordered() if stage in result
    )
