"""Construction of provider adapters from a type tag."""

from enum import Enum

from aihub.ai.errors import ProviderConstructionError
from aihub.ai.providers import (
    BaseAIProvider,
    ClaudeProvider,
    GeminiProvider,
    OpenAICompatibleProvider,
    OpenAIProvider,
    ZhipuProvider,
)
from aihub.ai.types import ProviderConfig


class ProviderType(str, Enum):
    """Supported provider type tags."""

    OPENAI = "openai"
    GEMINI = "gemini"
    CLAUDE = "claude"
    ZHIPU = "zhipu"
    OPENAI_COMPATIBLE = "openai-compatible"


PROVIDER_CLASSES: dict[ProviderType, type[BaseAIProvider]] = {
    ProviderType.OPENAI: OpenAIProvider,
    ProviderType.GEMINI: GeminiProvider,
    ProviderType.CLAUDE: ClaudeProvider,
    ProviderType.ZHIPU: ZhipuProvider,
    ProviderType.OPENAI_COMPATIBLE: OpenAICompatibleProvider,
}

DISPLAY_NAMES: dict[ProviderType, str] = {
    ProviderType.OPENAI: "OpenAI",
    ProviderType.GEMINI: "Google Gemini",
    ProviderType.CLAUDE: "Anthropic Claude",
    ProviderType.ZHIPU: "Zhipu AI",
    ProviderType.OPENAI_COMPATIBLE: "OpenAI Compatible API",
}


class AIProviderFactory:
    """Maps provider type tags to adapter instances."""

    @staticmethod
    def create_provider(
        provider_type: ProviderType | str, config: ProviderConfig
    ) -> BaseAIProvider:
        """Create an adapter for the given type.

        Args:
            provider_type: One of the supported type tags.
            config: Decrypted provider configuration.

        Returns:
            A freshly constructed adapter.

        Raises:
            ProviderConstructionError: If the type is unknown or the adapter
                rejects the configuration.
        """
        try:
            provider_type = ProviderType(provider_type)
        except ValueError:
            raise ProviderConstructionError(
                f"Unsupported provider type: {provider_type}"
            ) from None

        try:
            return PROVIDER_CLASSES[provider_type](config)
        except ProviderConstructionError:
            raise
        except Exception as e:
            raise ProviderConstructionError(
                f"Failed to create {DISPLAY_NAMES[provider_type]} provider: {e}"
            ) from e

    @staticmethod
    def get_supported_types() -> list[ProviderType]:
        """Return every supported type tag."""
        return list(ProviderType)

    @staticmethod
    def get_provider_display_name(provider_type: ProviderType | str) -> str:
        """Return the display name for a type tag, or the tag itself if unknown."""
        try:
            return DISPLAY_NAMES[ProviderType(provider_type)]
        except ValueError:
            return str(provider_type)
