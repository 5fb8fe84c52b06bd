"""Provider catalog endpoint handlers."""

import logging

from fastapi import APIRouter, HTTPException

from aihub.ai.catalog import ConfigurationSource, ProviderRecord
from aihub.ai.factory import AIProviderFactory
from aihub.ai.failover import (
    build_provider,
    check_provider_connection,
    get_available_providers,
)
from aihub.ai.types import AIModelInfo
from aihub.api.deps import CatalogDep, CipherDep, SettingsDep
from aihub.models.response import (
    ConnectionTestResponse,
    ModelSummary,
    ProviderSummary,
    ProviderTypeInfo,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_provider_or_404(
    catalog: ConfigurationSource, provider_id: int
) -> ProviderRecord:
    provider = await catalog.get_provider(provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail="Provider not found")
    return provider


@router.get("", response_model=list[ProviderSummary])
async def list_providers(catalog: CatalogDep) -> list[ProviderSummary]:
    """List enabled providers with their enabled models.

    Stored keys are never returned, only whether one is set.
    """
    result = []
    for provider, models in await get_available_providers(catalog):
        result.append(
            ProviderSummary(
                id=provider.id,
                name=provider.name,
                type=provider.type,
                type_name=AIProviderFactory.get_provider_display_name(provider.type),
                base_url=provider.base_url,
                has_api_key=bool(provider.api_key),
                models=[
                    ModelSummary(id=m.id, model_id=m.model_id, name=m.name)
                    for m in models
                ],
            )
        )

    logger.debug(f"Returning {len(result)} providers")
    return result


@router.get("/types", response_model=list[ProviderTypeInfo])
async def list_provider_types() -> list[ProviderTypeInfo]:
    """List the provider type tags this server can construct."""
    return [
        ProviderTypeInfo(
            type=provider_type.value,
            name=AIProviderFactory.get_provider_display_name(provider_type),
        )
        for provider_type in AIProviderFactory.get_supported_types()
    ]


@router.get("/{provider_id}/models", response_model=list[AIModelInfo])
async def list_provider_models(
    provider_id: int,
    settings: SettingsDep,
    catalog: CatalogDep,
    cipher: CipherDep,
) -> list[AIModelInfo]:
    """Ask the vendor which models the stored credentials can use."""
    record = await _get_provider_or_404(catalog, provider_id)
    provider = build_provider(record, cipher, settings.ai.request_timeout_seconds)
    return await provider.list_models()


@router.post("/{provider_id}/test", response_model=ConnectionTestResponse)
async def probe_provider(
    provider_id: int,
    catalog: CatalogDep,
    cipher: CipherDep,
) -> ConnectionTestResponse:
    """Probe a stored provider's credentials against its vendor."""
    record = await _get_provider_or_404(catalog, provider_id)
    api_key = cipher.decrypt(record.api_key)

    success = await check_provider_connection(record.type, api_key, record.base_url)
    logger.info(
        f"Connection test for provider {provider_id}: {'ok' if success else 'failed'}",
        extra={"provider": record.name},
    )
    return ConnectionTestResponse(
        success=success,
        message="Connection successful" if success else "Connection failed",
    )
