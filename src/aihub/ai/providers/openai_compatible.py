"""Adapter for any endpoint speaking the OpenAI chat completions format."""

import logging

from aihub.ai.errors import ProviderConstructionError, VendorAPIError
from aihub.ai.providers.base import BaseAIProvider
from aihub.ai.providers.openai import (
    build_chat_request,
    completion_to_response,
    create_client,
)
from aihub.ai.types import AIMessage, AIModelInfo, AIResponse, ChatOptions, ProviderConfig

logger = logging.getLogger(__name__)


class OpenAICompatibleProvider(BaseAIProvider):
    """Adapter for self-hosted or third-party OpenAI-compatible APIs.

    Unlike the OpenAI adapter there is no sensible default endpoint, so a
    base URL is mandatory.
    """

    def __init__(self, config: ProviderConfig):
        if not config.base_url:
            raise ProviderConstructionError(
                "base_url is required for OpenAI-compatible provider"
            )
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
        """List every model the endpoint reports. Errors propagate."""
        try:
            page = await self.client.models.list()
        except Exception as e:
            raise VendorAPIError(
                self.get_provider_name(), f"Failed to list models: {e}"
            ) from e

        return [
            AIModelInfo(id=model.id, name=model.id, description=model.id)
            for model in page.data
        ]

    async def test_connection(self) -> bool:
        try:
            await self.client.models.list()
            return True
        except Exception as e:
            logger.debug(f"OpenAI-compatible connection test failed: {e}")
            return False

    def get_provider_name(self) -> str:
        return "OpenAI Compatible"
