"""Tests for AI layer exceptions."""

from aihub.ai.errors import (
    AIError,
    EmptyResponseError,
    EmptyResponseReason,
    FailoverExhaustedError,
    VendorAPIError,
)


class TestVendorAPIError:
    """Tests for VendorAPIError."""

    def test_message_prefixed_with_provider(self):
        """Test the message names the provider."""
        error = VendorAPIError("OpenAI", "rate limited", 429)
        assert str(error) == "OpenAI API error: rate limited"
        assert error.provider == "OpenAI"
        assert error.detail == "rate limited"
        assert error.status_code == 429

    def test_is_ai_error(self):
        """Test vendor errors share the AI base class."""
        assert isinstance(VendorAPIError("Claude", "boom"), AIError)


class TestEmptyResponseError:
    """Tests for EmptyResponseError."""

    def test_default_reason(self):
        """Test the reason defaults to EMPTY."""
        error = EmptyResponseError("Gemini", "nothing")
        assert error.reason == EmptyResponseReason.EMPTY
        assert error.status_code is None

    def test_is_vendor_error(self):
        """Test empty responses are vendor errors with the provider prefix."""
        error = EmptyResponseError("Zhipu AI", "blocked", EmptyResponseReason.CONTENT_FILTER)
        assert isinstance(error, VendorAPIError)
        assert str(error) == "Zhipu AI API error: blocked"


class TestFailoverExhaustedError:
    """Tests for FailoverExhaustedError."""

    def test_message_lists_every_attempt(self):
        """Test the message joins attempt errors in order."""
        error = FailoverExhaustedError(["Service 1 failed: a", "Service 2 failed: b"])
        assert str(error) == (
            "All AI services failed. Errors:\nService 1 failed: a\nService 2 failed: b"
        )
        assert error.errors == ["Service 1 failed: a", "Service 2 failed: b"]

    def test_errors_copied(self):
        """Test later changes to the input list do not leak in."""
        errors = ["Service 1 failed: a"]
        error = FailoverExhaustedError(errors)
        errors.append("extra")
        assert error.errors == ["Service 1 failed: a"]
