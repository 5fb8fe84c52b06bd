"""API route registration."""

from fastapi import APIRouter

from aihub.api.handlers.chat import router as chat_router
from aihub.api.handlers.health import router as health_router
from aihub.api.handlers.providers import router as providers_router

# Main API router that aggregates all endpoint routers
api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])

api_router.include_router(chat_router, prefix="/api/ai", tags=["chat"])

api_router.include_router(providers_router, prefix="/api/ai-providers", tags=["providers"])
