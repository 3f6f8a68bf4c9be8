"""
Base provider protocols.

These define the interfaces that concrete providers must implement.
Using Protocol for structural subtyping - no explicit inheritance required.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class LanguageIdentifier(Protocol):
    """
    Identifies the dominant language of a text sample.

    Example implementation:
        class FixedLanguage:
            def identify(self, sample: str) -> str | None:
                return "en"
    """

    def identify(self, sample: str) -> Optional[str]:
        """
        Best-guess language of the sample.

        Args:
            sample: Text to identify

        Returns:
            A language tag (e.g. "en"), or None if undetermined
        """
        ...


class ProviderRegistry:
    """
    Registry for discovering and instantiating providers.

    Providers are registered by name and can be instantiated from configuration.
    This allows the store configuration (TOML) to specify providers by name
    rather than requiring code changes.

    Example:
        registry = ProviderRegistry()
        registry.register_language("langdetect", LangdetectIdentifier)

        # Later, from config:
        provider = registry.create_language("langdetect", {"seed": 0})
    """

    def __init__(self):
        self._language_providers: dict[str, type] = {}
        self._lazy_loaded = False

    def _ensure_providers_loaded(self) -> None:
        """Lazily load provider modules."""
        if self._lazy_loaded:
            return
        self._lazy_loaded = True
        # Importing registers the classes; nothing is instantiated
        from . import language  # noqa: F401

    def register_language(self, name: str, provider_class: type) -> None:
        """Register a language identifier class."""
        self._language_providers[name] = provider_class

    def create_language(self, name: str, params: dict | None = None) -> LanguageIdentifier:
        """Create a language identifier instance."""
        self._ensure_providers_loaded()
        if name not in self._language_providers:
            available = ", ".join(self._language_providers.keys()) or "none"
            raise ValueError(
                f"Unknown language provider: '{name}'. "
                f"Available providers: {available}."
            )
        try:
            return self._language_providers[name](**(params or {}))
        except Exception as e:
            raise RuntimeError(
                f"Failed to create language provider '{name}': {e}"
            ) from e

    def list_language_providers(self) -> list[str]:
        self._ensure_providers_loaded()
        return list(self._language_providers.keys())


_registry = ProviderRegistry()


def get_registry() -> ProviderRegistry:
    """Get the global provider registry."""
    return _registry
