"""Multi-provider AI layer: adapters, factory, service binding and failover."""

from aihub.ai.errors import (
    AIError,
    ConfigurationError,
    EmptyResponseError,
    EmptyResponseReason,
    FailoverExhaustedError,
    ProviderConstructionError,
    VendorAPIError,
)
from aihub.ai.factory import AIProviderFactory, ProviderType
from aihub.ai.failover import (
    chat_with_failover,
    get_ai_service_by_id,
    get_all_available_ai_services,
    get_default_ai_service,
)
from aihub.ai.service import AIService
from aihub.ai.types import AIMessage, AIModelInfo, AIResponse, ChatOptions, ProviderConfig

__all__ = [
    "AIError",
    "AIMessage",
    "AIModelInfo",
    "AIProviderFactory",
    "AIResponse",
    "AIService",
    "ChatOptions",
    "ConfigurationError",
    "EmptyResponseError",
    "EmptyResponseReason",
    "FailoverExhaustedError",
    "ProviderConfig",
    "ProviderConstructionError",
    "ProviderType",
    "VendorAPIError",
    "chat_with_failover",
    "get_ai_service_by_id",
    "get_all_available_ai_services",
    "get_default_ai_service",
]
