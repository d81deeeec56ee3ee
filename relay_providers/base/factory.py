"""Handler factory.

Purpose
-------
Map a configuration's provider key to the handler class that speaks that
vendor's protocol. Handler modules are imported lazily with ``importlib`` so
an uninstalled vendor SDK only matters when its handler is requested.

Failure semantics
-----------------
The factory performs no retries or fallbacks; it either returns a handler or
raises :class:`UnknownProviderError` with an actionable message.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Optional, Tuple, Type, Union

from .models import ProviderSettings


class UnknownProviderError(ValueError):
    """Raised when a provider key cannot be resolved to a handler.

    Failure modes:
    - the key is not registered;
    - the handler module cannot be imported or lacks the handler class.

    Errors raised by the handler constructor itself propagate unchanged.
    """


SettingsInput = Union[ProviderSettings, Mapping[str, Any], None]


def create_provider(provider: str, settings: SettingsInput = None, **kwargs: Any) -> Any:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, settings=settings, **kwargs)


class ProviderFactory:
    """Create handlers from a provider key (e.g. ``"anthropic"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "anthropic": {"module": "relay_providers.anthropic.client", "class": "AnthropicHandler"},
        "openai-native": {"module": "relay_providers.openai.client", "class": "OpenAiNativeHandler"},
        "openrouter": {"module": "relay_providers.openrouter.client", "class": "OpenRouterHandler"},
        "deepseek": {"module": "relay_providers.deepseek.client", "class": "DeepSeekHandler"},
        "xai": {"module": "relay_providers.xai.client", "class": "XAIHandler"},
        "minimax": {"module": "relay_providers.minimax.client", "class": "MiniMaxHandler"},
        "zai": {"module": "relay_providers.zai.client", "class": "ZAiHandler"},
        "chutes": {"module": "relay_providers.chutes.client", "class": "ChutesHandler"},
        "baseten": {"module": "relay_providers.baseten.client", "class": "BasetenHandler"},
        "unbound": {"module": "relay_providers.unbound.client", "class": "UnboundHandler"},
        "roo": {"module": "relay_providers.roo.client", "class": "RooHandler"},
        "gemini": {"module": "relay_providers.gemini.client", "class": "GeminiHandler"},
        "mistral": {"module": "relay_providers.mistral.client", "class": "MistralHandler"},
        "cerebras": {"module": "relay_providers.cerebras.client", "class": "CerebrasHandler"},
        "mock": {"module": "relay_providers.mock.client", "class": "MockHandler"},
    }

    @classmethod
    def create(cls, provider: str, *, settings: SettingsInput = None, **kwargs: Any) -> Any:
        """Instantiate the handler registered for ``provider``.

        ``settings`` may be a :class:`ProviderSettings` or a plain mapping
        (validated into one). Remaining ``kwargs`` go to the handler
        constructor (injected clients, auth services...).

        Raises:
            UnknownProviderError: unknown key, import failure or missing class.
        """
        name = (provider or "").lower().strip()
        if name not in cls._PROVIDERS:
            raise UnknownProviderError(f"Unknown provider '{provider}'")
        entry = cls._PROVIDERS[name]
        module_path, class_name = entry["module"], entry["class"]

        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for provider '{provider}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Handler class '{class_name}' not found in '{module_path}' for provider '{provider}'"
            ) from exc

        return klass(settings=cls._coerce_settings(settings), **kwargs)

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Registered provider keys in declaration order."""
        return tuple(cls._PROVIDERS.keys())

    @staticmethod
    def _coerce_settings(settings: SettingsInput) -> Optional[ProviderSettings]:
        if settings is None or isinstance(settings, ProviderSettings):
            return settings
        return ProviderSettings.model_validate(dict(settings))


__all__ = ["ProviderFactory", "UnknownProviderError", "create_provider"]
