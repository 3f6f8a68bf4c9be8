"""
Providers for language identification and text sampling.
"""

from .base import LanguageIdentifier, ProviderRegistry, get_registry

__all__ = ["LanguageIdentifier", "ProviderRegistry", "get_registry"]
