"""Decision flow backend package."""

from .app import create_app
from .config import get_settings
from .orchestrator import PipelineListener, PipelineOrchestrator

__all__ = ["create_app", "get_settings", "PipelineListener", "PipelineOrchestrator"]
