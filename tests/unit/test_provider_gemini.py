"""Tests for the Gemini adapter."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from google.genai import types

from aihub.ai.errors import EmptyResponseError, EmptyResponseReason, VendorAPIError
from aihub.ai.providers.gemini import (
    DEFAULT_MODEL,
    FALLBACK_MODELS,
    SAFETY_SETTINGS,
    GeminiProvider,
    to_gemini_history,
)
from aihub.ai.types import AIMessage, ChatOptions, ProviderConfig

CONVERSATION = [
    AIMessage(role="system", content="Be kind."),
    AIMessage(role="user", content="Hi"),
    AIMessage(role="assistant", content="Hello!"),
    AIMessage(role="user", content="Tell me a joke"),
]


def make_response(
    text="Why did the chicken...",
    finish_reason=types.FinishReason.STOP,
    safety_ratings=None,
    usage=True,
):
    """Build an object shaped like a GenerateContentResponse."""
    return SimpleNamespace(
        text=text,
        candidates=[
            SimpleNamespace(finish_reason=finish_reason, safety_ratings=safety_ratings)
        ],
        usage_metadata=(
            SimpleNamespace(prompt_token_count=8, candidates_token_count=4, total_token_count=12)
            if usage
            else None
        ),
    )


def make_provider(response=None, error=None, handler=None):
    """Gemini adapter whose chat session returns ``response`` or raises ``error``."""
    transport = httpx.MockTransport(handler) if handler else None
    provider = GeminiProvider(ProviderConfig(api_key="gemini-key"), transport=transport)
    session = MagicMock()
    session.send_message = AsyncMock(return_value=response, side_effect=error)
    provider.client = MagicMock()
    provider.client.aio.chats.create = MagicMock(return_value=session)
    return provider, session


class TestToGeminiHistory:
    """Tests for to_gemini_history."""

    def test_role_mapping(self):
        """Test assistant maps to model and everything else to user."""
        history = to_gemini_history(CONVERSATION[:-1])
        assert [c.role for c in history] == ["user", "user", "model"]
        assert history[2].parts[0].text == "Hello!"


class TestGeminiChat:
    """Tests for GeminiProvider.chat."""

    @pytest.mark.asyncio
    async def test_history_and_last_message(self):
        """Test earlier turns become history and the last turn is sent."""
        provider, session = make_provider(make_response())

        response = await provider.chat(CONVERSATION, ChatOptions(temperature=0.4, max_tokens=64))

        kwargs = provider.client.aio.chats.create.call_args.kwargs
        assert kwargs["model"] == DEFAULT_MODEL
        assert len(kwargs["history"]) == 3
        assert kwargs["config"].temperature == 0.4
        assert kwargs["config"].max_output_tokens == 64
        assert kwargs["config"].safety_settings == SAFETY_SETTINGS
        session.send_message.assert_awaited_once_with("Tell me a joke")
        assert response.content == "Why did the chicken..."
        assert response.model == DEFAULT_MODEL
        assert response.usage.total_tokens == 12

    @pytest.mark.asyncio
    async def test_single_message_has_no_history(self):
        """Test a one-turn conversation starts with empty history."""
        provider, _ = make_provider(make_response())
        await provider.chat([AIMessage(role="user", content="Hi")], ChatOptions(model="gemini-1.5-pro"))
        kwargs = provider.client.aio.chats.create.call_args.kwargs
        assert kwargs["history"] is None
        assert kwargs["model"] == "gemini-1.5-pro"

    @pytest.mark.asyncio
    async def test_missing_usage_is_zero(self):
        """Test absent usage metadata maps to zero counts."""
        provider, _ = make_provider(make_response(usage=False))
        response = await provider.chat(CONVERSATION)
        assert response.usage.total_tokens == 0

    @pytest.mark.asyncio
    async def test_safety_block(self):
        """Test SAFETY finish reason lists the blocked categories."""
        ratings = [
            SimpleNamespace(category=types.HarmCategory.HARM_CATEGORY_HARASSMENT, blocked=True),
            SimpleNamespace(category=types.HarmCategory.HARM_CATEGORY_HATE_SPEECH, blocked=False),
        ]
        provider, _ = make_provider(
            make_response(
                text=None, finish_reason=types.FinishReason.SAFETY, safety_ratings=ratings
            )
        )

        with pytest.raises(EmptyResponseError) as exc_info:
            await provider.chat(CONVERSATION)

        assert exc_info.value.reason == EmptyResponseReason.SAFETY
        assert "HARM_CATEGORY_HARASSMENT" in str(exc_info.value)
        assert "HATE_SPEECH" not in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_recitation_block(self):
        """Test RECITATION finish reason raises EmptyResponseError."""
        provider, _ = make_provider(
            make_response(text=None, finish_reason=types.FinishReason.RECITATION)
        )
        with pytest.raises(EmptyResponseError) as exc_info:
            await provider.chat(CONVERSATION)
        assert exc_info.value.reason == EmptyResponseReason.RECITATION

    @pytest.mark.asyncio
    async def test_blank_text(self):
        """Test blank text names the model in the error."""
        provider, _ = make_provider(make_response(text="   "))
        with pytest.raises(EmptyResponseError, match=f"Model: {DEFAULT_MODEL}"):
            await provider.chat(CONVERSATION)

    @pytest.mark.asyncio
    async def test_sdk_error_wrapped(self):
        """Test SDK failures become VendorAPIError."""
        provider, _ = make_provider(error=RuntimeError("quota exceeded"))
        with pytest.raises(VendorAPIError, match="^Gemini API error: quota exceeded"):
            await provider.chat(CONVERSATION)


class TestGeminiListModels:
    """Tests for GeminiProvider.list_models."""

    @pytest.mark.asyncio
    async def test_filters_generate_content(self):
        """Test only generateContent models are listed without the prefix."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.url.params["key"]
            return httpx.Response(
                200,
                json={
                    "models": [
                        {
                            "name": "models/gemini-1.5-pro",
                            "displayName": "Gemini 1.5 Pro",
                            "supportedGenerationMethods": ["generateContent", "countTokens"],
                        },
                        {
                            "name": "models/text-embedding-004",
                            "supportedGenerationMethods": ["embedContent"],
                        },
                    ]
                },
            )

        provider, _ = make_provider(handler=handler)
        models = await provider.list_models()

        assert seen["key"] == "gemini-key"
        assert [m.id for m in models] == ["gemini-1.5-pro"]
        assert models[0].name == "Gemini 1.5 Pro"

    @pytest.mark.asyncio
    async def test_falls_back_on_error(self):
        """Test API failures return the static list."""
        provider, _ = make_provider(handler=lambda request: httpx.Response(403))
        models = await provider.list_models()
        assert models == FALLBACK_MODELS
        assert len(models) == 6


class TestGeminiConnection:
    """Tests for GeminiProvider.test_connection."""

    @pytest.mark.asyncio
    async def test_probe(self):
        """Test the probe reports success and failure without raising."""
        provider, _ = make_provider()
        provider.client.aio.models.generate_content = AsyncMock(return_value=make_response())
        assert await provider.test_connection() is True

        provider.client.aio.models.generate_content = AsyncMock(side_effect=RuntimeError("bad key"))
        assert await provider.test_connection() is False
