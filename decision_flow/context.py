"""Render a workflow request into the text block shared by every stage prompt."""

from __future__ import annotations

from .schemas import WorkflowRequest

CONTEXT_FIELDS = (
    ("Business Goal", "business_goal"),
    ("Industry", "industry"),
    ("Budget", "budget"),
    ("Timeline", "timeline"),
    ("Constraints", "constraints"),
)


def build_context(request: WorkflowRequest) -> str:
    """Return the fixed-order, human-readable context for ``request``."""

    return "\n".join(f"{label}: {getattr(request, attribute)}" for label, attribute in CONTEXT_FIELDS)
