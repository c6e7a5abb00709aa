"""Canonical artifacts substituted when live generation fails."""

from __future__ import annotations

import copy
from typing import Dict

from .schemas import StageArtifact, StageKind


FALLBACK_ARTIFACTS: Dict[StageKind, StageArtifact] = {
    StageKind.RESEARCH: {
        "marketSize": "€2.5B+ European market with 15% YoY growth",
        "competitors": ["Microsoft Teams", "Slack", "Zoom", "Salesforce"],
        "trends": ["AI-first customer service", "Omnichannel integration", "Self-service automation"],
        "opportunities": ["EU data compliance focus", "SMB market gap", "Industry-specific solutions"],
        "confidence": 0.75,
    },
    StageKind.ANALYSIS: {
        "risks": [
            "High competition from established players",
            "Regulatory compliance complexity",
            "Customer acquisition costs",
        ],
        "opportunities": [
            "Growing demand for AI-powered solutions",
            "EU data sovereignty requirements",
            "Underserved SMB segment",
        ],
        "feasibilityScore": 0.72,
        "recommendations": ["Start with pilot customers", "Focus on EU compliance as differentiator"],
        "confidence": 0.78,
    },
    StageKind.STRATEGY: {
        "actionPlan": [
            "Phase 1: MVP Development (Months 1-3)",
            "Phase 2: Beta Testing (Months 4-5)",
            "Phase 3: EU Launch (Months 6-7)",
            "Phase 4: Scale & Iterate (Months 8-9)",
        ],
        "timeline": "9-month roadmap with quarterly milestones and KPI checkpoints",
        "budget": "€300K total: €150K development, €75K marketing, €75K operations",
        "kpis": ["Customer acquisition rate", "Monthly recurring revenue", "Customer satisfaction score"],
        "confidence": 0.81,
    },
    StageKind.VALIDATION: {
        "validationScore": 0.79,
        "issues": ["Timeline may be aggressive for EU compliance", "Budget allocation needs marketing focus"],
        "improvements": ["Add 2-month buffer for compliance", "Increase marketing spend to 35%"],
        "finalRecommendation": (
            "Proceed with strategy but adjust timeline and budget allocation for realistic EU market entry"
        ),
        "confidence": 0.84,
    },
}


def fallback_for(stage: StageKind) -> StageArtifact:
    """Return a fresh copy of the canonical artifact for ``stage``."""

    return copy.deepcopy(FALLBACK_ARTIFACTS[stage])
