"""Turn generated text into schema-valid stage artifacts."""

from __future__ import annotations

import json
import re
from typing import Any

from pydantic import ValidationError

from .errors import FormatError
from .schemas import STAGE_MODELS, StageArtifact, StageKind

_FENCED_BLOCK = re.compile(r"```[\w+-]*[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?[ \t]*```$")


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
    except ValueError:
        return False
    return True


def normalize_response(text: str) -> str:
    """Strip code-fence markers bounding the payload and surrounding whitespace.

    Backticks inside JSON string values are left alone.
    """

    stripped = text.strip()
    if not stripped.startswith("```") and _is_json(stripped):
        return stripped

    unwrapped = _CLOSING_FENCE.sub("", _OPENING_FENCE.sub("", stripped)).strip()
    if stripped.startswith("```") and _is_json(unwrapped):
        return unwrapped

    # Fenced block surrounded by prose.
    match = _FENCED_BLOCK.search(stripped)
    if match:
        return match.group(1).strip()
    return unwrapped


def _describe(exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    return "; ".join(problems)


def validate_artifact(stage: StageKind, data: Any) -> StageArtifact:
    """Validate ``data`` against the stage schema and return a plain dict.

    Missing list fields become empty lists, unknown fields are dropped.
    """

    if not isinstance(data, dict):
        raise FormatError(f"{stage.value} payload must be a JSON object, got {type(data).__name__}")
    model = STAGE_MODELS[stage]
    try:
        validated = model.model_validate(data)
    except ValidationError as exc:
        raise FormatError(f"{stage.value} payload failed validation: {_describe(exc)}") from exc
    return validated.model_dump()


def parse_artifact(stage: StageKind, text: str) -> StageArtifact:
    """Parse generated ``text`` into the artifact for ``stage``.

    Raises :class:`FormatError` when the normalized text is not JSON or does not
    match the stage schema. There is no partial success.
    """

    if not isinstance(text, str):
        raise FormatError(f"{stage.value} response must be text, got {type(text).__name__}")
    normalized = normalize_response(text)
    if not normalized:
        raise FormatError(f"{stage.value} response is empty")
    try:
        payload = json.loads(normalized)
    except json.JSONDecodeError as exc:
        raise FormatError(f"{stage.value} response is not valid JSON: {exc.msg}") from exc
    return validate_artifact(stage, payload)
