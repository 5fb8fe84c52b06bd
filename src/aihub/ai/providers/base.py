"""Capability contract implemented by every provider adapter."""

from abc import ABC, abstractmethod

from aihub.ai.types import AIMessage, AIModelInfo, AIResponse, ChatOptions, ProviderConfig


class BaseAIProvider(ABC):
    """Uniform chat/list/test contract over one AI vendor.

    Adapters implement this directly; none of them extends another.
    """

    def __init__(self, config: ProviderConfig):
        self.config = config
        self.api_key = config.api_key
        self.base_url = config.base_url

    @abstractmethod
    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        """Send a conversation and return the normalized reply.

        Raises:
            VendorAPIError: If the call fails or yields no content.
        """

    @abstractmethod
    async def list_models(self) -> list[AIModelInfo]:
        """Enumerate models offered by the provider."""

    @abstractmethod
    async def test_connection(self) -> bool:
        """Probe the provider. Never raises."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Display label of the adapter."""
