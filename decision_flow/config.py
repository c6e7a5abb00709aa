"""Configuration helpers for the decision_flow backend."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Mapping

from dotenv import load_dotenv

ENV_PREFIX = "DECISION_FLOW_"
KNOWN_PROVIDERS = ("proxy", "anthropic", "openai")

DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-0"
DEFAULT_ANTHROPIC_VERSION = "2023-06-01"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_STAGE_DELAY = 1.5
DEFAULT_REQUEST_TIMEOUT = 60.0

load_dotenv(override=False)


@dataclass(frozen=True)
class Settings:
    """Settings container for generation providers and pipeline pacing.

    A configured proxy URL is considered the primary provider; without one the
    configuration falls back to direct provider keys in priority order.
    """

    anthropic_api_key: str | None = None
    openai_api_key: str | None = None
    proxy_url: str | None = None
    forced_provider: str | None = None
    anthropic_model: str = DEFAULT_ANTHROPIC_MODEL
    anthropic_version: str = DEFAULT_ANTHROPIC_VERSION
    openai_model: str = DEFAULT_OPENAI_MODEL
    max_tokens: int = DEFAULT_MAX_TOKENS
    stage_delay_seconds: float = DEFAULT_STAGE_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def primary_provider(self) -> str | None:
        """Return the preferred provider based on available configuration."""

        if self.forced_provider:
            return self.forced_provider
        if self.proxy_url:
            return "proxy"
        if self.anthropic_api_key:
            return "anthropic"
        if self.openai_api_key:
            return "openai"
        return None

    @property
    def has_anthropic_key(self) -> bool:
        return bool(self.anthropic_api_key)


def _read_float(environ: Mapping[str, str], key: str, default: float) -> float:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value >= 0 else default


def _read_int(environ: Mapping[str, str], key: str, default: int) -> int:
    raw = environ.get(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _read_origins(environ: Mapping[str, str]) -> List[str]:
    """Split the ``DECISION_FLOW_ALLOWED_ORIGINS`` override into a list."""

    raw = environ.get(f"{ENV_PREFIX}ALLOWED_ORIGINS")
    if raw:
        origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
        if origins:
            return origins
    return ["*"]


def _read_provider(environ: Mapping[str, str]) -> str | None:
    raw = (environ.get(f"{ENV_PREFIX}PROVIDER") or "").strip().lower()
    return raw if raw in KNOWN_PROVIDERS else None


def load_settings(environ: Mapping[str, str]) -> Settings:
    """Build settings from an explicit environment mapping."""

    return Settings(
        anthropic_api_key=environ.get("ANTHROPIC_API_KEY") or None,
        openai_api_key=environ.get("OPENAI_API_KEY") or None,
        proxy_url=environ.get(f"{ENV_PREFIX}PROXY_URL") or None,
        forced_provider=_read_provider(environ),
        anthropic_model=environ.get(f"{ENV_PREFIX}ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL,
        openai_model=environ.get(f"{ENV_PREFIX}OPENAI_MODEL") or DEFAULT_OPENAI_MODEL,
        max_tokens=_read_int(environ, f"{ENV_PREFIX}MAX_TOKENS", DEFAULT_MAX_TOKENS),
        stage_delay_seconds=_read_float(environ, f"{ENV_PREFIX}STAGE_DELAY", DEFAULT_STAGE_DELAY),
        request_timeout=_read_float(environ, f"{ENV_PREFIX}REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT),
        allowed_origins=_read_origins(environ),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Read environment variables and return cached settings."""

    return load_settings(os.environ)
