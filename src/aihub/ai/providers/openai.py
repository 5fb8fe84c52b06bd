"""OpenAI adapter and helpers for the OpenAI wire format."""

import logging
from typing import Any

from openai import AsyncOpenAI

from aihub.ai.errors import EmptyResponseError, EmptyResponseReason, VendorAPIError
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

DEFAULT_MODEL = "gpt-3.5-turbo"


def create_client(config: ProviderConfig) -> AsyncOpenAI:
    """Create an async OpenAI client from a provider config."""
    kwargs: dict[str, Any] = {"api_key": config.api_key}
    if config.base_url:
        kwargs["base_url"] = config.base_url
    if config.timeout is not None:
        kwargs["timeout"] = config.timeout
    return AsyncOpenAI(**kwargs)


def build_chat_request(
    messages: list[AIMessage],
    options: ChatOptions | None,
    default_model: str = DEFAULT_MODEL,
) -> dict[str, Any]:
    """Build keyword arguments for ``chat.completions.create``.

    Unset options are left out so the vendor applies its own defaults.
    """
    options = options or ChatOptions()
    request: dict[str, Any] = {
        "model": options.model or default_model,
        "messages": [{"role": m.role, "content": m.content} for m in messages],
    }
    if options.temperature is not None:
        request["temperature"] = options.temperature
    if options.max_tokens is not None:
        request["max_tokens"] = options.max_tokens
    return request


def completion_to_response(provider: str, completion: Any) -> AIResponse:
    """Normalize a chat completion into an AIResponse.

    Args:
        provider: Display name used as the error prefix.
        completion: Chat completion object in the OpenAI shape.

    Raises:
        VendorAPIError: If the completion carries no choice or message.
        EmptyResponseError: If the message content is null or blank.
    """
    if not completion.choices:
        raise VendorAPIError(provider, "No response choices from API")

    choice = completion.choices[0]
    if choice.message is None:
        raise VendorAPIError(provider, "No message in response choice")

    content = choice.message.content
    finish_reason = choice.finish_reason or "unknown"

    if content is None:
        if finish_reason == "content_filter":
            raise EmptyResponseError(
                provider,
                "Response blocked by content filter",
                EmptyResponseReason.CONTENT_FILTER,
            )
        if finish_reason == "length":
            raise EmptyResponseError(
                provider,
                "Response truncated due to length limit",
                EmptyResponseReason.LENGTH,
            )
        raise EmptyResponseError(
            provider, f"Model returned null content. Finish reason: {finish_reason}"
        )

    if not content.strip():
        raise EmptyResponseError(
            provider, f"Model returned empty content. Finish reason: {finish_reason}"
        )

    usage = None
    if completion.usage is not None:
        usage = TokenUsage(
            prompt_tokens=completion.usage.prompt_tokens,
            completion_tokens=completion.usage.completion_tokens,
            total_tokens=completion.usage.total_tokens,
        )

    return AIResponse(content=content, model=completion.model, usage=usage)


class OpenAIProvider(BaseAIProvider):
    """Adapter for the OpenAI API."""

    def __init__(self, config: ProviderConfig):
        super().__init__(config)
        self.client = create_client(config)

    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        try:
            completion = await self.client.chat.completions.create(
                **build_chat_request(messages, options)
            )
            return completion_to_response(self.get_provider_name(), completion)
        except VendorAPIError:
            raise
        except Exception as e:
            raise VendorAPIError(
                self.get_provider_name(), str(e), getattr(e, "status_code", None)
            ) from e

    async def list_models(self) -> list[AIModelInfo]:
        """List GPT models. Errors propagate."""
        try:
            page = await self.client.models.list()
        except Exception as e:
            raise VendorAPIError(
                self.get_provider_name(), f"Failed to list models: {e}"
            ) from e

        return [
            AIModelInfo(id=model.id, name=model.id, description=f"OpenAI {model.id}")
            for model in page.data
            if "gpt" in model.id
        ]

    async def test_connection(self) -> bool:
        try:
            await self.client.models.list()
            return True
        except Exception as e:
            logger.debug(f"OpenAI connection test failed: {e}")
            return False

    def get_provider_name(self) -> str:
        return "OpenAI"
