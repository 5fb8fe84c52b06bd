"""Tests for the provider factory."""

import pytest

from aihub.ai.errors import ProviderConstructionError
from aihub.ai.factory import AIProviderFactory, ProviderType
from aihub.ai.providers import (
    ClaudeProvider,
    GeminiProvider,
    OpenAICompatibleProvider,
    OpenAIProvider,
    ZhipuProvider,
)
from aihub.ai.types import ProviderConfig


class TestCreateProvider:
    """Tests for AIProviderFactory.create_provider."""

    @pytest.mark.parametrize(
        "provider_type,expected",
        [
            ("openai", OpenAIProvider),
            ("gemini", GeminiProvider),
            ("claude", ClaudeProvider),
            ("zhipu", ZhipuProvider),
        ],
    )
    def test_builds_adapter_for_tag(self, provider_type, expected):
        """Test each tag maps to its adapter class."""
        provider = AIProviderFactory.create_provider(
            provider_type, ProviderConfig(api_key="test-key")
        )
        assert isinstance(provider, expected)
        assert provider.api_key == "test-key"

    def test_accepts_enum_member(self):
        """Test ProviderType members work as well as strings."""
        provider = AIProviderFactory.create_provider(
            ProviderType.OPENAI_COMPATIBLE,
            ProviderConfig(api_key="k", base_url="http://localhost:11434/v1"),
        )
        assert isinstance(provider, OpenAICompatibleProvider)

    def test_unknown_type_rejected(self):
        """Test unknown tags raise ProviderConstructionError."""
        with pytest.raises(ProviderConstructionError, match="Unsupported provider type: mistral"):
            AIProviderFactory.create_provider("mistral", ProviderConfig(api_key="k"))

    def test_compatible_without_base_url_rejected(self):
        """Test the OpenAI-compatible adapter needs a base URL."""
        with pytest.raises(ProviderConstructionError, match="base_url is required"):
            AIProviderFactory.create_provider(
                "openai-compatible", ProviderConfig(api_key="k")
            )

    def test_returns_fresh_instances(self):
        """Test adapters are never shared between calls."""
        config = ProviderConfig(api_key="k")
        first = AIProviderFactory.create_provider("zhipu", config)
        second = AIProviderFactory.create_provider("zhipu", config)
        assert first is not second


class TestSupportedTypes:
    """Tests for type listing and display names."""

    def test_all_types_supported(self):
        """Test every tag is reported."""
        assert {t.value for t in AIProviderFactory.get_supported_types()} == {
            "openai",
            "gemini",
            "claude",
            "zhipu",
            "openai-compatible",
        }

    @pytest.mark.parametrize(
        "provider_type,name",
        [
            ("openai", "OpenAI"),
            ("gemini", "Google Gemini"),
            ("claude", "Anthropic Claude"),
            ("zhipu", "Zhipu AI"),
            ("openai-compatible", "OpenAI Compatible API"),
        ],
    )
    def test_display_names(self, provider_type, name):
        """Test display names for known tags."""
        assert AIProviderFactory.get_provider_display_name(provider_type) == name

    def test_unknown_display_name_echoes_tag(self):
        """Test unknown tags are returned unchanged."""
        assert AIProviderFactory.get_provider_display_name("mistral") == "mistral"
