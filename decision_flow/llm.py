"""Generation clients, the only part of the workflow that performs network I/O.

Every client exposes ``async generate(prompt) -> str`` and makes exactly one
outbound request per call. Non-success responses and network failures raise
:class:`TransportError`; a success response without usable text raises
:class:`FormatError`.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Protocol

import httpx
from openai import APIError, APIStatusError, AsyncOpenAI

from .config import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_ANTHROPIC_VERSION,
    DEFAULT_MAX_TOKENS,
    DEFAULT_OPENAI_MODEL,
    DEFAULT_REQUEST_TIMEOUT,
    Settings,
)
from .errors import FormatError, TransportError

logger = logging.getLogger(__name__)

ANTHROPIC_MESSAGES_URL = "https://api.anthropic.com/v1/messages"


class GenerationClient(Protocol):
    """Anything that can turn a prompt into generated text."""

    async def generate(self, prompt: str) -> str:
        ...


def extract_text(payload: Any) -> str:
    """Return ``content[0].text`` from a messages-style response body."""

    try:
        text = payload["content"][0]["text"]
    except (KeyError, IndexError, TypeError) as exc:
        raise FormatError("response body is missing content[0].text") from exc
    if not isinstance(text, str) or not text:
        raise FormatError("response body has an empty content[0].text")
    return text


def _error_details(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text or {}


async def _post_json(
    url: str,
    body: Dict[str, Any],
    *,
    headers: Dict[str, str] | None = None,
    timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.post(url, json=body, headers=headers)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("POST %s failed before a response arrived: %s", url, exc)
        raise TransportError(0, str(exc) or exc.__class__.__name__) from exc

    if not response.is_success:
        details = _error_details(response)
        logger.warning("POST %s returned %s: %s", url, response.status_code, details)
        raise TransportError(response.status_code, details)

    try:
        return response.json()
    except ValueError as exc:
        logger.warning("POST %s returned a body that is not JSON", url)
        raise TransportError(0, f"malformed response body: {exc}") from exc


class ProxyGenerationClient:
    """Send ``{"prompt": ...}`` to a generation proxy and read ``content[0].text``."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        payload = await _post_json(self.url, {"prompt": prompt}, timeout=self.timeout, transport=self._transport)
        return extract_text(payload)


class AnthropicGenerationClient:
    """Call the Anthropic Messages API directly.

    ``create_message`` returns the raw response body so the proxy route can pass
    it through untouched; ``generate`` extracts the text.
    """

    def __init__(
        self,
        api_key: str | None,
        *,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        version: str = DEFAULT_ANTHROPIC_VERSION,
        url: str = ANTHROPIC_MESSAGES_URL,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.version = version
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

    async def create_message(self, prompt: str) -> Any:
        if not self.api_key:
            raise TransportError(0, "ANTHROPIC_API_KEY is not configured")
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.version,
        }
        body = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        return await _post_json(self.url, body, headers=headers, timeout=self.timeout, transport=self._transport)

    async def generate(self, prompt: str) -> str:
        return extract_text(await self.create_message(prompt))


class OpenAIGenerationClient:
    """Chat completion backed generation through the OpenAI SDK."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = DEFAULT_OPENAI_MODEL,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        timeout: float | None = DEFAULT_REQUEST_TIMEOUT,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        # The SDK retries on its own by default; one attempt per stage here.
        self._client = client or AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    async def generate(self, prompt: str) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=self.max_tokens,
            )
        except APIStatusError as exc:
            logger.warning("OpenAI returned %s: %s", exc.status_code, exc.message)
            raise TransportError(exc.status_code, exc.body if exc.body is not None else exc.message) from exc
        except APIError as exc:
            logger.warning("OpenAI request failed: %s", exc)
            raise TransportError(0, str(exc)) from exc

        message = response.choices[0].message.content if response.choices else None
        if not message:
            raise FormatError("completion has no message content")
        return message


def build_generation_client(settings: Settings) -> GenerationClient | None:
    """Return the client for the configured provider, or ``None`` without one."""

    provider = settings.primary_provider
    if provider == "proxy" and settings.proxy_url:
        return ProxyGenerationClient(settings.proxy_url, timeout=settings.request_timeout)
    if provider == "anthropic" and settings.anthropic_api_key:
        return build_anthropic_client(settings)
    if provider == "openai" and settings.openai_api_key:
        return OpenAIGenerationClient(
            settings.openai_api_key,
            model=settings.openai_model,
            max_tokens=settings.max_tokens,
            timeout=settings.request_timeout,
        )
    return None


def build_anthropic_client(settings: Settings) -> AnthropicGenerationClient:
    return AnthropicGenerationClient(
        settings.anthropic_api_key,
        model=settings.anthropic_model,
        max_tokens=settings.max_tokens,
        version=settings.anthropic_version,
        timeout=settings.request_timeout,
    )
