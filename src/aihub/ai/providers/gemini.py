"""Google Gemini adapter built on the google-genai SDK."""

import logging
from typing import Any

import httpx
from google import genai
from google.genai import types

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

DEFAULT_MODEL = "gemini-pro"
MODELS_URL = "https://generativelanguage.googleapis.com/v1beta/models"
MODELS_TIMEOUT_SECONDS = 30.0

# All four adjustable categories are opened up; blocked output is still
# reported through the finish reason and turned into an error below.
SAFETY_SETTINGS = [
    types.SafetySetting(category=category, threshold=types.HarmBlockThreshold.BLOCK_NONE)
    for category in (
        types.HarmCategory.HARM_CATEGORY_HARASSMENT,
        types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
        types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
        types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
    )
]

FALLBACK_MODELS = [
    AIModelInfo(id="gemini-pro", name="Gemini Pro", description="Google Gemini Pro"),
    AIModelInfo(
        id="gemini-pro-vision",
        name="Gemini Pro Vision",
        description="Google Gemini Pro Vision",
    ),
    AIModelInfo(id="gemini-1.5-pro", name="Gemini 1.5 Pro", description="Google Gemini 1.5 Pro"),
    AIModelInfo(
        id="gemini-1.5-flash",
        name="Gemini 1.5 Flash",
        description="Google Gemini 1.5 Flash",
    ),
    AIModelInfo(
        id="gemini-1.5-pro-latest",
        name="Gemini 1.5 Pro Latest",
        description="Google Gemini 1.5 Pro (Latest)",
    ),
    AIModelInfo(
        id="gemini-1.5-flash-latest",
        name="Gemini 1.5 Flash Latest",
        description="Google Gemini 1.5 Flash (Latest)",
    ),
]


def to_gemini_history(messages: list[AIMessage]) -> list[types.Content]:
    """Convert prior turns to Gemini contents.

    ``assistant`` becomes ``model``; every other role is sent as ``user``.
    """
    return [
        types.Content(
            role="model" if m.role == "assistant" else "user",
            parts=[types.Part(text=m.content)],
        )
        for m in messages
    ]


def _enum_value(value: Any) -> str:
    return str(getattr(value, "value", value))


class GeminiProvider(BaseAIProvider):
    """Adapter for the Google Generative Language API."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config)
        http_options = None
        if config.base_url or config.timeout is not None:
            http_options = types.HttpOptions(
                base_url=config.base_url,
                timeout=int(config.timeout * 1000) if config.timeout is not None else None,
            )
        self.client = genai.Client(api_key=config.api_key, http_options=http_options)
        self._transport = transport

    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        options = options or ChatOptions()
        model_name = options.model or DEFAULT_MODEL

        try:
            if not messages:
                raise VendorAPIError(self.get_provider_name(), "No messages to send")

            history = to_gemini_history(messages[:-1])
            chat = self.client.aio.chats.create(
                model=model_name,
                config=types.GenerateContentConfig(
                    safety_settings=SAFETY_SETTINGS,
                    temperature=options.temperature,
                    max_output_tokens=options.max_tokens,
                ),
                history=history or None,
            )
            response = await chat.send_message(messages[-1].content)

            self._check_finish_reason(response)

            text = response.text
            if not text or not text.strip():
                raise EmptyResponseError(
                    self.get_provider_name(),
                    "Model returned empty response. This may be due to safety "
                    f"filters or model limitations. Model: {model_name}",
                )

            return AIResponse(content=text, model=model_name, usage=self._usage(response))

        except VendorAPIError:
            raise
        except Exception as e:
            raise VendorAPIError(
                self.get_provider_name(), str(e) or "Unknown error", getattr(e, "code", None)
            ) from e

    def _check_finish_reason(self, response: Any) -> None:
        """Raise for SAFETY and RECITATION blocks on the first candidate."""
        if not response.candidates:
            return

        candidate = response.candidates[0]
        finish_reason = _enum_value(candidate.finish_reason)

        if finish_reason == "SAFETY":
            blocked = ", ".join(
                _enum_value(rating.category)
                for rating in candidate.safety_ratings or []
                if rating.blocked
            )
            raise EmptyResponseError(
                self.get_provider_name(),
                f"Response blocked by safety filter: {blocked or 'Unknown reason'}",
                EmptyResponseReason.SAFETY,
            )

        if finish_reason == "RECITATION":
            raise EmptyResponseError(
                self.get_provider_name(),
                "Response blocked due to recitation concerns",
                EmptyResponseReason.RECITATION,
            )

    @staticmethod
    def _usage(response: Any) -> TokenUsage:
        metadata = response.usage_metadata
        if metadata is None:
            return TokenUsage()
        return TokenUsage(
            prompt_tokens=metadata.prompt_token_count or 0,
            completion_tokens=metadata.candidates_token_count or 0,
            total_tokens=metadata.total_token_count or 0,
        )

    async def list_models(self) -> list[AIModelInfo]:
        """List generateContent-capable models, falling back to a static list."""
        try:
            async with httpx.AsyncClient(
                timeout=MODELS_TIMEOUT_SECONDS, transport=self._transport
            ) as http:
                response = await http.get(MODELS_URL, params={"key": self.api_key})
                response.raise_for_status()
                data = response.json()

            models = []
            for model in data["models"]:
                if "generateContent" not in model.get("supportedGenerationMethods", []):
                    continue
                model_id = model["name"].removeprefix("models/")
                name = model.get("displayName") or model_id
                models.append(
                    AIModelInfo(
                        id=model_id,
                        name=name,
                        description=model.get("description") or f"Google {name}",
                    )
                )
            return models

        except Exception as e:
            logger.warning(f"Failed to fetch Gemini models from API, using fallback list: {e}")
            return list(FALLBACK_MODELS)

    async def test_connection(self) -> bool:
        try:
            response = await self.client.aio.models.generate_content(
                model=DEFAULT_MODEL, contents="test"
            )
            return response is not None
        except Exception as e:
            logger.debug(f"Gemini connection test failed: {e}")
            return False

    def get_provider_name(self) -> str:
        return "Gemini"
