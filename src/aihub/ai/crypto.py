"""Encryption of stored provider API keys.

Payload layout: ``base64(salt | iv | tag | ciphertext)``, AES-256-GCM with a
key derived from the configured secret by PBKDF2-SHA256.
"""

import base64
import os

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from aihub.ai.errors import ConfigurationError

SALT_LENGTH = 32
IV_LENGTH = 16
TAG_LENGTH = 16
KEY_LENGTH = 32
ITERATIONS = 100_000
MIN_SECRET_LENGTH = 32


class CredentialCipher:
    """Encrypts and decrypts provider credentials with a shared secret."""

    def __init__(self, secret: str, iterations: int = ITERATIONS):
        if not secret:
            raise ConfigurationError("Encryption key is not set")
        if len(secret) < MIN_SECRET_LENGTH:
            raise ConfigurationError(
                f"Encryption key must be at least {MIN_SECRET_LENGTH} characters long"
            )
        self._secret = secret.encode("utf-8")
        self.iterations = iterations

    def _derive_key(self, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=self.iterations,
        )
        return kdf.derive(self._secret)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt a credential for storage."""
        salt = os.urandom(SALT_LENGTH)
        iv = os.urandom(IV_LENGTH)
        sealed = AESGCM(self._derive_key(salt)).encrypt(iv, plaintext.encode("utf-8"), None)
        # AESGCM appends the tag; stored layout keeps it ahead of the ciphertext
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]
        return base64.b64encode(salt + iv + tag + ciphertext).decode("ascii")

    def decrypt(self, payload: str) -> str:
        """Decrypt a stored credential.

        Raises:
            ConfigurationError: If the payload is malformed, was tampered
                with, or was encrypted under a different secret.
        """
        try:
            raw = base64.b64decode(payload, validate=True)
        except (ValueError, TypeError) as e:
            raise ConfigurationError("Failed to decrypt provider credential") from e

        header = SALT_LENGTH + IV_LENGTH + TAG_LENGTH
        if len(raw) < header:
            raise ConfigurationError("Failed to decrypt provider credential")

        salt = raw[:SALT_LENGTH]
        iv = raw[SALT_LENGTH : SALT_LENGTH + IV_LENGTH]
        tag = raw[SALT_LENGTH + IV_LENGTH : header]
        ciphertext = raw[header:]

        try:
            plaintext = AESGCM(self._derive_key(salt)).decrypt(iv, ciphertext + tag, None)
        except InvalidTag as e:
            raise ConfigurationError("Failed to decrypt provider credential") from e

        return plaintext.decode("utf-8")
