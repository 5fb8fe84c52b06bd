"""Zhipu AI (BigModel) adapter over plain REST."""

import logging
from typing import Any

import httpx

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

DEFAULT_BASE_URL = "https://open.bigmodel.cn/api/paas/v4"
DEFAULT_MODEL = "glm-4"
DEFAULT_TIMEOUT_SECONDS = 60.0

FALLBACK_MODELS = [
    AIModelInfo(id="glm-4", name="GLM-4", description="Zhipu AI flagship foundation model"),
    AIModelInfo(id="glm-4v", name="GLM-4V", description="Zhipu AI multimodal model"),
    AIModelInfo(id="glm-3-turbo", name="GLM-3-Turbo", description="Zhipu AI fast response model"),
    AIModelInfo(id="glm-4-plus", name="GLM-4-Plus", description="Zhipu AI enhanced model"),
    AIModelInfo(id="glm-4-air", name="GLM-4-Air", description="Zhipu AI lightweight model"),
    AIModelInfo(id="glm-4-flash", name="GLM-4-Flash", description="Zhipu AI fast response model"),
]

# Zhipu reports moderation blocks as "sensitive"
EMPTY_REASONS = {
    "sensitive": (EmptyResponseReason.CONTENT_FILTER, "Response blocked by content filter"),
    "length": (EmptyResponseReason.LENGTH, "Response truncated due to length limit"),
}


class ZhipuProvider(BaseAIProvider):
    """Adapter for the Zhipu BigModel chat completions API."""

    def __init__(
        self,
        config: ProviderConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config)
        if not self.base_url:
            self.base_url = DEFAULT_BASE_URL
        self.base_url = self.base_url.rstrip("/")
        self.timeout = config.timeout if config.timeout is not None else DEFAULT_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.api_key}"},
            timeout=self.timeout,
            transport=self._transport,
        )

    async def chat(
        self, messages: list[AIMessage], options: ChatOptions | None = None
    ) -> AIResponse:
        options = options or ChatOptions()
        payload: dict[str, Any] = {
            "model": options.model or DEFAULT_MODEL,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
        }
        if options.temperature is not None:
            payload["temperature"] = options.temperature
        if options.max_tokens is not None:
            payload["max_tokens"] = options.max_tokens

        try:
            async with self._client() as http:
                response = await http.post("/chat/completions", json=payload)

            if not response.is_success:
                raise VendorAPIError(
                    self.get_provider_name(),
                    f"HTTP {response.status_code}: {response.text}",
                    response.status_code,
                )

            data = response.json()
            choices = data.get("choices") or []
            if not choices or not choices[0].get("message"):
                raise VendorAPIError(self.get_provider_name(), "No response from Zhipu AI")

            choice = choices[0]
            content = choice["message"].get("content")
            if not content or not content.strip():
                finish_reason = choice.get("finish_reason") or "unknown"
                reason, detail = EMPTY_REASONS.get(
                    finish_reason,
                    (
                        EmptyResponseReason.EMPTY,
                        f"Model returned empty content. Finish reason: {finish_reason}",
                    ),
                )
                raise EmptyResponseError(self.get_provider_name(), detail, reason)

            usage = None
            if data.get("usage"):
                usage = TokenUsage(
                    prompt_tokens=data["usage"].get("prompt_tokens", 0),
                    completion_tokens=data["usage"].get("completion_tokens", 0),
                    total_tokens=data["usage"].get("total_tokens", 0),
                )

            return AIResponse(
                content=content, model=data.get("model") or payload["model"], usage=usage
            )

        except VendorAPIError:
            raise
        except Exception as e:
            raise VendorAPIError(self.get_provider_name(), str(e)) from e

    async def list_models(self) -> list[AIModelInfo]:
        """List models from ``/models``, falling back to a static list."""
        try:
            async with self._client() as http:
                response = await http.get("/models")
            response.raise_for_status()
            data = response.json()

            if not isinstance(data.get("data"), list):
                raise ValueError("Invalid response format")

            models = []
            for model in data["data"]:
                name = model.get("name") or model["id"]
                models.append(
                    AIModelInfo(
                        id=model["id"],
                        name=name,
                        description=model.get("description") or f"Zhipu AI {name}",
                    )
                )
            return models

        except Exception as e:
            logger.warning(f"Failed to fetch Zhipu models from API, using fallback list: {e}")
            return list(FALLBACK_MODELS)

    async def test_connection(self) -> bool:
        try:
            async with self._client() as http:
                response = await http.post(
                    "/chat/completions",
                    json={
                        "model": DEFAULT_MODEL,
                        "messages": [{"role": "user", "content": "test"}],
                        "max_tokens": 10,
                    },
                )
            return response.is_success
        except Exception as e:
            logger.debug(f"Zhipu connection test failed: {e}")
            return False

    def get_provider_name(self) -> str:
        return "Zhipu AI"
