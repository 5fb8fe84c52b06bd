"""Data contracts shared by every provider adapter."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]


class AIMessage(BaseModel):
    """A single chat turn."""

    role: Role
    content: str


class TokenUsage(BaseModel):
    """Token accounting reported by a provider."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class AIResponse(BaseModel):
    """Normalized response of a successful chat call."""

    model_config = ConfigDict(frozen=True)

    content: str
    model: str
    usage: TokenUsage | None = None


class AIModelInfo(BaseModel):
    """A model discoverable from a provider."""

    id: str
    name: str
    description: str | None = None


class ChatOptions(BaseModel):
    """Per-call chat options."""

    model: str | None = None
    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    max_tokens: int | None = Field(default=None, gt=0)
    # Accepted for API compatibility; no adapter streams.
    stream: bool = False


class ProviderConfig(BaseModel):
    """Decrypted credentials and settings for one provider instance.

    Built per request from a stored provider record and discarded after use.
    Extra keys from the record's free-form config are kept as attributes.
    """

    model_config = ConfigDict(extra="allow")

    api_key: str
    base_url: str | None = None
    timeout: float | None = None
