"""Dependency injection for API handlers."""

from typing import Annotated

from fastapi import Depends, Request

from aihub.ai.catalog import ConfigurationSource, InMemoryCatalog
from aihub.ai.crypto import CredentialCipher
from aihub.config import Settings, get_settings


def get_settings_dependency(request: Request) -> Settings:
    """Get application settings.

    Prefers the settings the app was created with, so tests that pass their
    own ``Settings`` to ``create_app`` see them in handlers too.
    """
    settings = getattr(request.app.state, "settings", None)
    return settings if settings is not None else get_settings()


SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]


def get_catalog(settings: SettingsDep) -> ConfigurationSource:
    """Provider/model catalog read from the ``catalog`` settings section."""
    return InMemoryCatalog.from_settings(settings.catalog)


CatalogDep = Annotated[ConfigurationSource, Depends(get_catalog)]


def get_cipher(settings: SettingsDep) -> CredentialCipher:
    """Cipher for stored provider keys.

    Raises:
        ConfigurationError: If no usable encryption key is configured.
    """
    return CredentialCipher(settings.security.encryption_key)


CipherDep = Annotated[CredentialCipher, Depends(get_cipher)]


def get_request_id(request: Request) -> str | None:
    """Extract request ID from request state.

    The request ID is set by the request ID middleware.
    """
    return getattr(request.state, "request_id", None)


RequestIdDep = Annotated[str | None, Depends(get_request_id)]
