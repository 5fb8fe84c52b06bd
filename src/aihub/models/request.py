"""Request body models for the AI endpoints."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from aihub.ai.types import AIMessage, ChatOptions


class ChatRequest(BaseModel):
    """Request body for the chat endpoint.

    Field names are camelCase on the wire (``providerId``, ``maxTokens``...).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    messages: list[AIMessage] = Field(..., min_length=1)
    provider_id: int | None = Field(
        default=None,
        description="Use this stored provider instead of the default/backup chain",
    )
    model_id: str | None = Field(
        default=None,
        description="Vendor model identifier, e.g. 'gpt-4o'",
    )
    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    max_tokens: int | None = Field(default=None, gt=0)
    use_failover: bool = Field(
        default=True,
        description="Walk the backup models when the default fails. "
        "Ignored when providerId is given.",
    )

    def to_options(self) -> ChatOptions:
        return ChatOptions(
            model=self.model_id,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
