"""Provider adapters, one per supported AI vendor."""

from aihub.ai.providers.base import BaseAIProvider
from aihub.ai.providers.claude import ClaudeProvider
from aihub.ai.providers.gemini import GeminiProvider
from aihub.ai.providers.openai import OpenAIProvider
from aihub.ai.providers.openai_compatible import OpenAICompatibleProvider
from aihub.ai.providers.zhipu import ZhipuProvider

__all__ = [
    "BaseAIProvider",
    "ClaudeProvider",
    "GeminiProvider",
    "OpenAICompatibleProvider",
    "OpenAIProvider",
    "ZhipuProvider",
]
