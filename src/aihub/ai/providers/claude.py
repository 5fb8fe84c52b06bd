"""Anthropic Claude adapter."""

import logging
from typing import Any

import httpx
from anthropic import AsyncAnthropic

from aihub.ai.errors import EmptyResponseError, VendorAPIError
from aihub.ai.providers.base import BaseAIProvider
from aihub.ai.types import (
    AIMessage,
    AIModelInfo,
    AIResponse,
    ChatOptions,
    ProviderConfig,
    TokenUsage,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 4096
DEFAULT_BASE_URL = "https://api.anthropic.com"
ANTHROPIC_VERSION = "2023-06-01"
CONNECTION_TEST_MODEL = "claude-3-5-haiku-20241022"
MODELS_TIMEOUT_SECONDS = 30.0

FALLBACK_MODELS = [
    AIModelInfo(
        id="claude-3-5-sonnet-20241022",
        name="Claude 3.5 Sonnet",
        description="Most intelligent model",
    ),
    AIModelInfo(
        id="claude-3-5-haiku-20241022",
        name="Claude 3.5 Haiku",
        description="Fastest model",
    ),
    AIModelInfo(
        id="claude-3-opus-20240229",
        name="Claude 3 Opus",
        description="Powerful model for highly complex tasks",
    ),
    AIModelInfo(
        id="claude-3-sonnet-20240229",
        name="Claude 3 Sonnet",
        description="Balance of intelligence and speed",
    ),
    AIModelInfo(
        id="claude-3-haiku-20240307",
        name="Claude 3 Haiku",
        description="Fast and compact model",
    ),
]


def split_system_message(
    messages: list[AIMessage],
) -> tuple[str | None, list[dict[str, str]]]:
    """Separate the system prompt from the conversation turns.

    The first system message becomes the system prompt. All system messages
    are dropped from the returned turns.

    Returns:
        Tuple of (system prompt or None, turn dicts for the Messages API).
    """
    system = next((m.content for m in messages if m.role == "system"), None)
    turns = [
        {"role": "assistant" if m.role == "assistant" else "user", "content": m.content}
        for m in messages
        if m.role != "system"
    ]
    return system, turns


class ClaudeProvider(BaseAIProvider):
    """Adapter for the Anthropic Messages API."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config)
        kwargs: dict[str, Any] = {"api_key": config.api_key}
        if config.base_url:
            kwargs["base_url"] = config.base_url
        if config.timeout is not None:
            kwargs["timeout"] = config.timeout
        self.client = AsyncAnthropic(**kwargs)
        self._transport = transport

    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        options = options or ChatOptions()
        system, turns = split_system_message(messages)

        request: dict[str, Any] = {
            "model": options.model or DEFAULT_MODEL,
            "max_tokens": options.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": turns,
        }
        if system is not None:
            request["system"] = system
        if options.temperature is not None:
            request["temperature"] = options.temperature

        try:
            response = await self.client.messages.create(**request)

            if not response.content:
                raise EmptyResponseError(
                    self.get_provider_name(),
                    f"Model returned no content. Stop reason: {response.stop_reason}",
                )

            block = response.content[0]
            if block.type != "text":
                raise VendorAPIError(
                    self.get_provider_name(), "Unexpected response type from Claude"
                )
            if not block.text or not block.text.strip():
                raise EmptyResponseError(
                    self.get_provider_name(),
                    f"Model returned empty content. Stop reason: {response.stop_reason}",
                )

            usage = TokenUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )
            return AIResponse(content=block.text, model=response.model, usage=usage)

        except VendorAPIError:
            raise
        except Exception as e:
            raise VendorAPIError(
                self.get_provider_name(), str(e), getattr(e, "status_code", None)
            ) from e

    async def list_models(self) -> list[AIModelInfo]:
        """List models from the REST endpoint, falling back to a static list."""
        base_url = (self.base_url or DEFAULT_BASE_URL).rstrip("/")
        try:
            async with httpx.AsyncClient(
                timeout=MODELS_TIMEOUT_SECONDS, transport=self._transport
            ) as http:
                response = await http.get(
                    f"{base_url}/v1/models",
                    headers={
                        "x-api-key": self.api_key,
                        "anthropic-version": ANTHROPIC_VERSION,
                    },
                )
                response.raise_for_status()
                data = response.json()

            models = []
            for model in data["data"]:
                name = model.get("display_name") or model["id"]
                models.append(
                    AIModelInfo(
                        id=model["id"],
                        name=name,
                        description=model.get("description") or f"Anthropic {name}",
                    )
                )
            return models

        except Exception as e:
            logger.warning(f"Failed to fetch Claude models from API, using fallback list: {e}")
            return list(FALLBACK_MODELS)

    async def test_connection(self) -> bool:
        try:
            await self.client.messages.create(
                model=CONNECTION_TEST_MODEL,
                max_tokens=10,
                messages=[{"role": "user", "content": "test"}],
            )
            return True
        except Exception as e:
            logger.debug(f"Claude connection test failed: {e}")
            return False

    def get_provider_name(self) -> str:
        return "Claude"
