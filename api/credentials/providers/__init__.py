"""
Lookup table for the providers this deployment knows about. Providers are
registered by type, the verifier never dispatches on provider names itself.
"""

from typing import Dict, Iterable, List, Optional

from django.conf import settings
from django.utils.module_loading import import_string

import api_logging as logging

from .base import Provider

log = logging.getLogger(__name__)


class ProviderRegistry:
    def __init__(self, providers: Optional[Iterable[Provider]] = None):
        self._providers: Dict[str, Provider] = {}
        for provider in providers or []:
            self.register(provider)

    def register(self, provider: Provider) -> None:
        if not provider.type:
            raise ValueError(f"Provider {provider!r} has no type")
        if provider.type in self._providers:
            raise ValueError(f"Provider '{provider.type}' is already registered")
        self._providers[provider.type] = provider

    def get(self, provider_type: str) -> Provider:
        return self._providers[provider_type]

    def __contains__(self, provider_type: str) -> bool:
        return provider_type in self._providers

    def types(self) -> List[str]:
        return list(self._providers.keys())


registry = ProviderRegistry()


def load_providers(provider_paths: Optional[List[str]] = None) -> ProviderRegistry:
    """
    Register the providers listed in `settings.IAM_PROVIDERS` (dotted paths to
    Provider subclasses). Providers already registered are skipped.
    """
    paths = provider_paths if provider_paths is not None else settings.IAM_PROVIDERS
    for path in paths:
        provider = import_string(path)()
        if provider.type not in registry:
            registry.register(provider)
            log.info("Registered provider '%s' from %s", provider.type, path)
    return registry


__all__ = ["Provider", "ProviderRegistry", "load_providers", "registry"]
