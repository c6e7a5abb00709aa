import pytest

from decision_flow.fallbacks import FALLBACK_ARTIFACTS, fallback_for
from decision_flow.parser import validate_artifact
from decision_flow.schemas import STAGE_MODELS, StageKind


def test_catalog_covers_every_stage() -> None:
    assert set(FALLBACK_ARTIFACTS) == set(StageKind)


@pytest.mark.parametrize("stage", list(StageKind))
def test_fallback_satisfies_stage_schema(stage: StageKind) -> None:
    artifact = fallback_for(stage)

    assert validate_artifact(stage, artifact) == artifact
    assert set(artifact) == set(STAGE_MODELS[stage].model_fields)


def test_fallback_returns_independent_copies() -> None:
    first = fallback_for(StageKind.RESEARCH)
    first["competitors"].append("Mutated Inc")

    assert "Mutated Inc" not in fallback_for(StageKind.RESEARCH)["competitors"]
