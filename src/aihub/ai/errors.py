"""Exceptions raised by the AI provider layer."""

from enum import Enum


class EmptyResponseReason(str, Enum):
    """Why a provider answered without usable content."""

    CONTENT_FILTER = "content_filter"
    LENGTH = "length"
    SAFETY = "safety"
    RECITATION = "recitation"
    EMPTY = "empty"


class AIError(Exception):
    """Base class for AI provider layer errors."""


class ProviderConstructionError(AIError):
    """An adapter could not be built from the given type and config."""


class ConfigurationError(AIError):
    """Stored configuration does not yield a usable model or provider."""


class VendorAPIError(AIError):
    """A vendor call failed or returned something unusable.

    Attributes:
        provider: Display name of the adapter that raised.
        detail: The underlying vendor message.
        status_code: HTTP status of the vendor response, when known.
    """

    def __init__(self, provider: str, detail: str, status_code: int | None = None):
        self.provider = provider
        self.detail = detail
        self.status_code = status_code
        super().__init__(f"{provider} API error: {detail}")


class EmptyResponseError(VendorAPIError):
    """The vendor answered but produced no content.

    Attributes:
        reason: The detected cause, EMPTY when none could be determined.
    """

    def __init__(
        self,
        provider: str,
        detail: str,
        reason: EmptyResponseReason = EmptyResponseReason.EMPTY,
    ):
        self.reason = reason
        super().__init__(provider, detail)


class FailoverExhaustedError(AIError):
    """Every configured candidate failed.

    Attributes:
        errors: Per-attempt messages in the order they were tried.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("All AI services failed. Errors:\n" + "\n".join(self.errors))
