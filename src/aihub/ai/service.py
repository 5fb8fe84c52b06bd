"""Binding of one adapter to an optional fixed model."""

from aihub.ai.providers import BaseAIProvider
from aihub.ai.types import AIMessage, AIResponse, ChatOptions


class AIService:
    """Chat entry point bound to a provider and, optionally, a model id."""

    def __init__(self, provider: BaseAIProvider, model_id: str | None = None):
        self._provider = provider
        self.model_id = model_id

    @property
    def provider(self) -> BaseAIProvider:
        return self._provider

    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        """Send a chat using the bound model unless ``options.model`` is set."""
        options = options or ChatOptions()
        if not options.model and self.model_id:
            options = options.model_copy(update={"model": self.model_id})
        return await self._provider.chat(messages, options)

    def __repr__(self) -> str:
        return (
            f"AIService(provider={self._provider.get_provider_name()!r}, "
            f"model_id={self.model_id!r})"
        )
