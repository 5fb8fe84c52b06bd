"""Shared fixtures for unit tests."""

import pytest

from aihub.ai.catalog import InMemoryCatalog, ModelRecord, ProviderRecord, SiteConfig
from aihub.ai.crypto import CredentialCipher
from aihub.ai.providers.base import BaseAIProvider
from aihub.ai.types import AIModelInfo, AIResponse, ProviderConfig

TEST_ENCRYPTION_KEY = "unit-test-encryption-key-0123456789abcdef"


class FakeProvider(BaseAIProvider):
    """In-memory adapter that records calls and answers or fails on demand."""

    def __init__(self, config, name="Fake", error=None, connected=True):
        super().__init__(config)
        self.name = name
        self.error = error
        self.connected = connected
        self.calls = []

    async def chat(self, messages, options=None):
        self.calls.append((messages, options))
        if self.error is not None:
            raise self.error
        model = options.model if options and options.model else "fake-default"
        return AIResponse(content=f"reply from {self.name}", model=model)

    async def list_models(self):
        return [AIModelInfo(id="fake-model", name="Fake Model")]

    async def test_connection(self):
        return self.connected

    def get_provider_name(self):
        return self.name


@pytest.fixture
def cipher():
    """Cipher with a low iteration count to keep tests fast."""
    return CredentialCipher(TEST_ENCRYPTION_KEY, iterations=1_000)


@pytest.fixture
def catalog(cipher):
    """Catalog with two enabled providers, one disabled provider and backups.

    Priority list: model 10 (openai), model 20 (claude), model 30 (zhipu,
    provider disabled).
    """
    providers = [
        ProviderRecord(id=1, name="Primary", type="openai", api_key=cipher.encrypt("key-1")),
        ProviderRecord(
            id=2,
            name="Backup",
            type="claude",
            api_key=cipher.encrypt("key-2"),
            base_url="https://claude.example.com",
        ),
        ProviderRecord(
            id=3,
            name="Disabled",
            type="zhipu",
            api_key=cipher.encrypt("key-3"),
            enabled=False,
        ),
    ]
    models = [
        ModelRecord(id=10, provider_id=1, model_id="gpt-4o", name="GPT-4o"),
        ModelRecord(id=11, provider_id=1, model_id="gpt-4o-mini", enabled=False),
        ModelRecord(id=20, provider_id=2, model_id="claude-3-5-sonnet-20241022"),
        ModelRecord(id=30, provider_id=3, model_id="glm-4"),
    ]
    site = SiteConfig(
        default_ai_model_id=10,
        backup_ai_model_id_1=20,
        backup_ai_model_id_2=30,
    )
    return InMemoryCatalog(providers, models, site)


@pytest.fixture
def fake_provider():
    """Factory for FakeProvider instances."""

    def factory(name="Fake", error=None, connected=True):
        return FakeProvider(
            ProviderConfig(api_key="fake-key"), name=name, error=error, connected=connected
        )

    return factory


@pytest.fixture
def encryption_key():
    """Secret long enough to satisfy the cipher."""
    return TEST_ENCRYPTION_KEY
