"""Chat endpoint handlers."""

import logging

from fastapi import APIRouter

from aihub.ai.failover import (
    chat_with_failover,
    get_ai_service_by_id,
    get_default_ai_service,
)
from aihub.ai.types import AIResponse
from aihub.api.deps import CatalogDep, CipherDep, RequestIdDep, SettingsDep
from aihub.models.request import ChatRequest
from aihub.models.response import DefaultModelResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat", response_model=AIResponse)
async def chat(
    request: ChatRequest,
    settings: SettingsDep,
    catalog: CatalogDep,
    cipher: CipherDep,
    request_id: RequestIdDep,
) -> AIResponse:
    """Answer a conversation.

    Routing:
    - ``providerId`` given: that provider, optionally pinned to ``modelId``
    - ``useFailover`` (default): default model, then each backup in order
    - otherwise: the default model only

    ``modelId`` only applies together with ``providerId``.

    AI layer errors propagate to the application's exception handler.
    """
    options = request.to_options()
    timeout = settings.ai.request_timeout_seconds

    logger.info(
        f"Chat request with {len(request.messages)} messages",
        extra={"request_id": request_id, "model": request.model_id},
    )

    if request.provider_id is not None:
        service = await get_ai_service_by_id(
            request.provider_id,
            request.model_id,
            catalog=catalog,
            cipher=cipher,
            default_timeout=timeout,
        )
        return await service.chat(request.messages, options)

    # Each candidate must use its own bound model
    options = options.model_copy(update={"model": None})

    if request.use_failover:
        return await chat_with_failover(
            request.messages,
            options,
            catalog=catalog,
            cipher=cipher,
            default_timeout=timeout,
        )

    service = await get_default_ai_service(catalog, cipher, timeout)
    return await service.chat(request.messages, options)


@router.get("/default-model", response_model=DefaultModelResponse)
async def default_model(catalog: CatalogDep) -> DefaultModelResponse:
    """Return the ids of the default and backup models."""
    site = await catalog.get_site_config()
    return DefaultModelResponse(
        default_model_id=site.default_ai_model_id,
        backup_model_id_1=site.backup_ai_model_id_1,
        backup_model_id_2=site.backup_ai_model_id_2,
        backup_model_id_3=site.backup_ai_model_id_3,
    )
