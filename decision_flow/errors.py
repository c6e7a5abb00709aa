"""Exception types raised inside the decision workflow."""

from __future__ import annotations

from typing import Any


class DecisionFlowError(Exception):
    """Base class for workflow errors."""


class TransportError(DecisionFlowError):
    """The generation call failed before producing text.

    ``status`` is the HTTP status of the failed response, or ``0`` for
    network-level failures where no usable response arrived.
    """

    def __init__(self, status: int, details: Any = None) -> None:
        self.status = status
        self.details = details
        super().__init__(f"generation call failed with status {status}: {details!r}")


class FormatError(DecisionFlowError):
    """Generated text could not be turned into a schema-valid artifact."""


class PipelineBusyError(DecisionFlowError):
    """``run_pipeline`` was called while a run is already in flight."""
