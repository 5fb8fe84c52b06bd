"""Resolution of stored models into services, and failover chat.

Every function takes its configuration source and cipher explicitly; nothing
here caches records, adapters or decrypted keys between calls.
"""

import logging

from pydantic import ValidationError

from aihub.ai.catalog import ConfigurationSource, ModelRecord, ProviderRecord
from aihub.ai.crypto import CredentialCipher
from aihub.ai.errors import (
    AIError,
    ConfigurationError,
    FailoverExhaustedError,
    ProviderConstructionError,
)
from aihub.ai.factory import AIProviderFactory, ProviderType
from aihub.ai.providers import BaseAIProvider
from aihub.ai.service import AIService
from aihub.ai.types import AIMessage, AIResponse, ChatOptions, ProviderConfig

logger = logging.getLogger(__name__)


def build_provider(
    record: ProviderRecord,
    cipher: CredentialCipher,
    default_timeout: float | None = None,
) -> BaseAIProvider:
    """Decrypt a provider record's key and construct its adapter.

    Keys in the record's free-form config are merged into the provider
    config; the record's own key and base URL always win.

    Raises:
        ConfigurationError: If the stored key cannot be decrypted.
        ProviderConstructionError: If the type or config is rejected.
    """
    api_key = cipher.decrypt(record.api_key)
    try:
        config = ProviderConfig(
            **{
                "timeout": default_timeout,
                **record.config,
                "api_key": api_key,
                "base_url": record.base_url or None,
            }
        )
    except ValidationError as e:
        raise ProviderConstructionError(
            f"Invalid config for provider {record.name}: {e}"
        ) from e
    return AIProviderFactory.create_provider(record.type, config)


async def _resolve_enabled(
    catalog: ConfigurationSource, model_id: int
) -> tuple[ModelRecord, ProviderRecord] | None:
    model = await catalog.get_model(model_id)
    if model is None or not model.enabled:
        return None
    provider = await catalog.get_provider(model.provider_id)
    if provider is None or not provider.enabled:
        return None
    return model, provider


async def get_all_available_ai_services(
    catalog: ConfigurationSource,
    cipher: CredentialCipher,
    default_timeout: float | None = None,
) -> list[AIService]:
    """Build services for the default and backup models, in priority order.

    Missing or disabled models and providers are skipped with a warning, as
    are candidates whose adapter cannot be built.

    Raises:
        ConfigurationError: If no model is configured or none is usable.
    """
    site = await catalog.get_site_config()
    model_ids = site.priority_model_ids()

    if not model_ids:
        raise ConfigurationError(
            "No AI models configured. Please set default and backup models "
            "in AI Configuration."
        )

    services: list[AIService] = []
    for model_id in model_ids:
        resolved = await _resolve_enabled(catalog, model_id)
        if resolved is None:
            logger.warning(f"Model {model_id} is not available, skipping...")
            continue

        model, provider = resolved
        try:
            instance = build_provider(provider, cipher, default_timeout)
        except AIError as e:
            logger.error(
                f"Failed to create service for model {model_id}: {e}",
                extra={"provider": provider.name, "model": model.model_id},
            )
            continue

        services.append(AIService(instance, model.model_id))

    if not services:
        raise ConfigurationError(
            "No AI services available. Please check your model configuration."
        )

    return services


async def chat_with_failover(
    messages: list[AIMessage],
    options: ChatOptions | None = None,
    *,
    catalog: ConfigurationSource,
    cipher: CredentialCipher,
    default_timeout: float | None = None,
) -> AIResponse:
    """Try each configured service in order until one answers.

    Candidates are attempted strictly one after another.

    Raises:
        ConfigurationError: If no usable service is configured.
        FailoverExhaustedError: If every candidate failed; carries one
            message per attempt, in order.
    """
    services = await get_all_available_ai_services(catalog, cipher, default_timeout)
    total = len(services)
    errors: list[str] = []

    for index, service in enumerate(services):
        attempt = index + 1
        log_extra = {
            "attempt": attempt,
            "provider": service.provider.get_provider_name(),
            "model": service.model_id,
        }
        logger.info(f"Trying AI service {attempt}/{total}...", extra=log_extra)

        try:
            response = await service.chat(messages, options)
        except Exception as e:
            message = f"Service {attempt} failed: {e}"
            logger.error(message, extra=log_extra)
            errors.append(message)
            if attempt < total:
                logger.info("Trying next backup service...")
            continue

        if index > 0:
            logger.warning(
                f"Failover successful: used backup service {attempt}", extra=log_extra
            )
        return response

    raise FailoverExhaustedError(errors)


async def get_default_ai_service(
    catalog: ConfigurationSource,
    cipher: CredentialCipher,
    default_timeout: float | None = None,
) -> AIService:
    """Return a service for the site default model.

    When no default is set, or it or its provider is disabled, the first
    enabled model of the first enabled provider is used instead.

    Raises:
        ConfigurationError: If no enabled model exists at all.
    """
    site = await catalog.get_site_config()

    if site.default_ai_model_id is not None:
        resolved = await _resolve_enabled(catalog, site.default_ai_model_id)
        if resolved is not None:
            model, provider = resolved
            return AIService(build_provider(provider, cipher, default_timeout), model.model_id)

    for provider in await catalog.list_providers():
        if not provider.enabled:
            continue
        for model in await catalog.list_models(provider.id):
            if model.enabled:
                return AIService(
                    build_provider(provider, cipher, default_timeout), model.model_id
                )

    raise ConfigurationError(
        "No AI models available. Please add a provider and fetch models "
        "in AI Configuration."
    )


async def get_ai_service_by_id(
    provider_id: int,
    model_id: str | None = None,
    *,
    catalog: ConfigurationSource,
    cipher: CredentialCipher,
    default_timeout: float | None = None,
) -> AIService:
    """Return a service for a specific provider, optionally pinned to a model.

    Raises:
        ConfigurationError: If the provider is missing or disabled, or the
            model id is not an enabled model of that provider.
    """
    provider = await catalog.get_provider(provider_id)
    if provider is None:
        raise ConfigurationError(f"AI provider with id {provider_id} not found")
    if not provider.enabled:
        raise ConfigurationError(f"AI provider {provider.name} is disabled")

    instance = build_provider(provider, cipher, default_timeout)

    if model_id:
        models = await catalog.list_models(provider_id)
        if not any(m.model_id == model_id and m.enabled for m in models):
            raise ConfigurationError(f"Model {model_id} not found or disabled")

    return AIService(instance, model_id)


async def get_available_providers(
    catalog: ConfigurationSource,
) -> list[tuple[ProviderRecord, list[ModelRecord]]]:
    """Return enabled providers with their enabled models."""
    result = []
    for provider in await catalog.list_providers():
        if not provider.enabled:
            continue
        models = [m for m in await catalog.list_models(provider.id) if m.enabled]
        result.append((provider, models))
    return result


async def check_provider_connection(
    provider_type: ProviderType | str,
    api_key: str,
    base_url: str | None = None,
) -> bool:
    """Construct an adapter from raw credentials and probe it. Never raises."""
    try:
        provider = AIProviderFactory.create_provider(
            provider_type, ProviderConfig(api_key=api_key, base_url=base_url)
        )
        return await provider.test_connection()
    except Exception as e:
        logger.error(f"Provider connection test failed: {e}")
        return False
