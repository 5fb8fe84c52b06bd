"""Tests for AI data contracts."""

import pytest
from pydantic import ValidationError

from aihub.ai.types import AIMessage, AIResponse, ChatOptions, ProviderConfig, TokenUsage


class TestAIMessage:
    """Tests for AIMessage."""

    @pytest.mark.parametrize("role", ["system", "user", "assistant"])
    def test_accepts_known_roles(self, role):
        """Test the three chat roles are accepted."""
        assert AIMessage(role=role, content="hi").role == role

    def test_rejects_unknown_role(self):
        """Test other roles fail validation."""
        with pytest.raises(ValidationError):
            AIMessage(role="tool", content="hi")


class TestChatOptions:
    """Tests for ChatOptions."""

    def test_defaults_are_unset(self):
        """Test every option defaults to unset so vendors apply their own."""
        options = ChatOptions()
        assert options.model is None
        assert options.temperature is None
        assert options.max_tokens is None
        assert options.stream is False

    @pytest.mark.parametrize("temperature", [0.0, 0.5, 1.0])
    def test_temperature_in_range(self, temperature):
        """Test temperatures within [0, 1] are accepted."""
        assert ChatOptions(temperature=temperature).temperature == temperature

    @pytest.mark.parametrize("temperature", [-0.1, 1.5])
    def test_temperature_out_of_range(self, temperature):
        """Test temperatures outside [0, 1] are rejected."""
        with pytest.raises(ValidationError):
            ChatOptions(temperature=temperature)

    def test_max_tokens_must_be_positive(self):
        """Test max_tokens of zero is rejected."""
        with pytest.raises(ValidationError):
            ChatOptions(max_tokens=0)


class TestAIResponse:
    """Tests for AIResponse."""

    def test_usage_optional(self):
        """Test usage may be omitted."""
        response = AIResponse(content="hello", model="gpt-4o")
        assert response.usage is None

    def test_is_immutable(self):
        """Test responses cannot be modified after creation."""
        response = AIResponse(content="hello", model="gpt-4o", usage=TokenUsage())
        with pytest.raises(ValidationError):
            response.content = "changed"


class TestProviderConfig:
    """Tests for ProviderConfig."""

    def test_extra_keys_kept(self):
        """Test free-form config keys are kept as attributes."""
        config = ProviderConfig(api_key="k", organization="org-1")
        assert config.organization == "org-1"

    def test_api_key_required(self):
        """Test the API key is mandatory."""
        with pytest.raises(ValidationError):
            ProviderConfig()
