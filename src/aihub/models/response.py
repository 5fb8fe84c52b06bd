"""Response models for the AI and provider endpoints."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DefaultModelResponse(CamelModel):
    """Catalog ids of the default and backup models."""

    default_model_id: int | None = None
    backup_model_id_1: int | None = None
    backup_model_id_2: int | None = None
    backup_model_id_3: int | None = None


class ModelSummary(CamelModel):
    """An enabled model under a provider."""

    id: int
    model_id: str
    name: str | None = None


class ProviderSummary(CamelModel):
    """An enabled provider without its credential."""

    id: int
    name: str
    type: str
    type_name: str
    base_url: str | None = None
    has_api_key: bool
    models: list[ModelSummary]


class ProviderTypeInfo(BaseModel):
    """A supported provider type tag and its display name."""

    type: str
    name: str


class ConnectionTestResponse(BaseModel):
    """Result of probing a provider's credentials."""

    success: bool
    message: str
