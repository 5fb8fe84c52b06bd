"""Stored provider/model configuration consumed by the orchestrator.

The orchestrator only sees the ``ConfigurationSource`` protocol; where the
records come from (settings file, database, admin API) is up to the caller.
"""

import json
from typing import Any, Protocol

from pydantic import BaseModel, Field, field_validator

MAX_BACKUP_MODELS = 3


class ProviderRecord(BaseModel):
    """A configured credential set for one vendor."""

    id: int
    name: str
    type: str
    api_key: str = Field(description="Encrypted API key")
    base_url: str | None = None
    enabled: bool = True
    config: dict[str, Any] = Field(default_factory=dict)

    @field_validator("config", mode="before")
    @classmethod
    def parse_config(cls, v):
        """Accept the free-form config as a JSON string as well as a dict."""
        if v is None or v == "":
            return {}
        if isinstance(v, str):
            return json.loads(v)
        return v


class ModelRecord(BaseModel):
    """A selectable model under a provider."""

    id: int
    provider_id: int
    model_id: str
    name: str | None = None
    enabled: bool = True


class SiteConfig(BaseModel):
    """Global default and backup model selection."""

    default_ai_model_id: int | None = None
    backup_ai_model_id_1: int | None = None
    backup_ai_model_id_2: int | None = None
    backup_ai_model_id_3: int | None = None

    def priority_model_ids(self) -> list[int]:
        """Return the configured model ids, default first, unset ids dropped."""
        ids = [
            self.default_ai_model_id,
            self.backup_ai_model_id_1,
            self.backup_ai_model_id_2,
            self.backup_ai_model_id_3,
        ]
        return [model_id for model_id in ids if model_id is not None]


class CatalogSettings(BaseModel):
    """Catalog section of the application settings."""

    providers: list[ProviderRecord] = Field(default_factory=list)
    models: list[ModelRecord] = Field(default_factory=list)
    site: SiteConfig = Field(default_factory=SiteConfig)


class ConfigurationSource(Protocol):
    """Read access to stored providers, models and the site config."""

    async def get_site_config(self) -> SiteConfig: ...

    async def get_model(self, model_id: int) -> ModelRecord | None: ...

    async def get_provider(self, provider_id: int) -> ProviderRecord | None: ...

    async def list_providers(self) -> list[ProviderRecord]: ...

    async def list_models(self, provider_id: int) -> list[ModelRecord]: ...


class InMemoryCatalog:
    """ConfigurationSource over in-memory records.

    List order stands in for creation order when picking a default model.
    """

    def __init__(
        self,
        providers: list[ProviderRecord] | None = None,
        models: list[ModelRecord] | None = None,
        site: SiteConfig | None = None,
    ):
        self._providers = {p.id: p for p in providers or []}
        self._models = {m.id: m for m in models or []}
        self._site = site or SiteConfig()

    @classmethod
    def from_settings(cls, catalog: CatalogSettings) -> "InMemoryCatalog":
        return cls(catalog.providers, catalog.models, catalog.site)

    async def get_site_config(self) -> SiteConfig:
        return self._site

    async def get_model(self, model_id: int) -> ModelRecord | None:
        return self._models.get(model_id)

    async def get_provider(self, provider_id: int) -> ProviderRecord | None:
        return self._providers.get(provider_id)

    async def list_providers(self) -> list[ProviderRecord]:
        return list(self._providers.values())

    async def list_models(self, provider_id: int) -> list[ModelRecord]:
        return [m for m in self._models.values() if m.provider_id == provider_id]
