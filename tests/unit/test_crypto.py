"""Tests for credential encryption."""

import base64

import pytest

from aihub.ai.crypto import (
    IV_LENGTH,
    SALT_LENGTH,
    TAG_LENGTH,
    CredentialCipher,
)
from aihub.ai.errors import ConfigurationError


class TestCredentialCipher:
    """Tests for CredentialCipher."""

    def test_decrypt_recovers_plaintext(self, cipher):
        """Test a stored key decrypts back to the original."""
        assert cipher.decrypt(cipher.encrypt("sk-secret-key")) == "sk-secret-key"

    def test_payload_layout(self, cipher):
        """Test payload is base64 of salt, IV, tag then ciphertext."""
        raw = base64.b64decode(cipher.encrypt("abc"))
        assert len(raw) == SALT_LENGTH + IV_LENGTH + TAG_LENGTH + len("abc")

    def test_random_salt_per_encryption(self, cipher):
        """Test encrypting twice yields different payloads."""
        assert cipher.encrypt("same") != cipher.encrypt("same")

    def test_wrong_secret_fails(self, cipher):
        """Test a payload cannot be read under another secret."""
        other = CredentialCipher("another-secret-that-is-long-enough-123", iterations=1_000)
        with pytest.raises(ConfigurationError, match="Failed to decrypt"):
            other.decrypt(cipher.encrypt("sk-secret"))

    def test_tampered_payload_fails(self, cipher):
        """Test modified ciphertext is rejected."""
        raw = bytearray(base64.b64decode(cipher.encrypt("sk-secret")))
        raw[-1] ^= 0x01
        with pytest.raises(ConfigurationError):
            cipher.decrypt(base64.b64encode(bytes(raw)).decode())

    @pytest.mark.parametrize("payload", ["not base64!!", base64.b64encode(b"short").decode()])
    def test_malformed_payload_fails(self, cipher, payload):
        """Test payloads that are not base64 or too short are rejected."""
        with pytest.raises(ConfigurationError):
            cipher.decrypt(payload)

    @pytest.mark.parametrize("secret", ["", "too-short"])
    def test_weak_secret_rejected(self, secret):
        """Test missing or short secrets are rejected up front."""
        with pytest.raises(ConfigurationError):
            CredentialCipher(secret)
