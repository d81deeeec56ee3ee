"""Base class for OpenAI-compatible Chat Completions handlers.

Purpose
-------
Centralize what every Chat Completions vendor handler shares: settings
resolution, lazy ``openai.OpenAI`` client construction, model selection
against a static table (optionally merged with a dynamic catalog) and the
``create_message`` / ``complete_prompt`` flow through
:class:`OpenAICompatibleChat`.

Subclasses declare a :class:`CompatibleProviderProfile` and override the small
hooks below when their vendor deviates:

- ``_make_client``: custom auth or headers
- ``_base_url``: derived endpoints (Z AI API lines)
- ``_default_temperature``: per-model defaults
- ``_convert_messages``: R1-format conversions
- ``_extra_params``: vendor-only body fields (``thinking``, ``reasoning``...)
- ``_request_options``: per-request headers
- ``_stream_hooks``: chunk hooks and reasoning extractors
- ``_uses_think_tags``: per-model ``<think>`` splitting

Failure semantics
-----------------
Every vendor failure surfaces as one :class:`ProviderError`; nothing is
retried. A missing API key is rejected at construction for vendors that
require one.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Iterator, List, Mapping, Optional, Sequence

try:
    from openai import OpenAI
except Exception:  # pragma: no cover
    OpenAI = None  # type: ignore

from ..errors import ErrorCode, ProviderError, completion_error
from ..interfaces_parts.model_catalog_source import ModelCatalogSource
from ..logging import get_logger, log_provider_error
from ..models import ModelInfo, ModelSelection, ProviderSettings, resolve_settings, select_model
from ..params import get_model_params
from ..streaming import StreamEvent
from .chat import CostFn, OpenAICompatibleChat, UsageParser, openai_usage_cost
from .usage import parse_chat_usage


@dataclass(frozen=True)
class CompatibleProviderProfile:
    """Static description of an OpenAI-compatible vendor.

    Attributes:
        provider_name: Factory/config key (``"deepseek"``).
        label: Human name used in error messages (``"DeepSeek"``).
        default_model_id: Model used when settings name none or an unknown one.
        models: Static model table.
        default_base_url: Endpoint used when settings give none.
        default_temperature: Temperature when the user sets none.
        think_tags: Split ``<think>`` spans out of content.
        requires_api_key: Reject construction without a key.
        fallback_info: Descriptor for unknown ids on dynamic catalogs; when
            set, unknown ids are kept instead of replaced by the default.
        usage_parser: Vendor usage mapping.
        cost_fn: Terminal cost from the final usage.
    """

    provider_name: str
    label: str
    default_model_id: str
    models: Mapping[str, ModelInfo]
    default_base_url: Optional[str] = None
    default_temperature: Optional[float] = 0.0
    think_tags: bool = True
    requires_api_key: bool = True
    fallback_info: Optional[ModelInfo] = None
    usage_parser: UsageParser = parse_chat_usage
    cost_fn: CostFn = openai_usage_cost


class BaseOpenAICompatibleHandler:
    """Shared orchestration for Chat Completions vendors.

    Args:
        settings: Per-handler settings; unset fields come from config.
        client: Optional pre-built ``openai.OpenAI`` client.
        catalog: Optional dynamic model catalog consulted before the static
            table.
    """

    profile: ClassVar[CompatibleProviderProfile]

    def __init__(
        self,
        settings: Optional[ProviderSettings] = None,
        client: Any = None,
        catalog: Optional[ModelCatalogSource] = None,
    ) -> None:
        self.settings = resolve_settings(self.profile.provider_name, settings)
        if self.profile.requires_api_key and not self.settings.api_key and client is None:
            raise ProviderError(
                code=ErrorCode.AUTH,
                message=f"{self.profile.label} API key is required",
                provider=self.profile.provider_name,
            )
        self._client = client
        self._catalog = catalog
        self._logger = get_logger(f"providers.{self.profile.provider_name}")
        self._chat = OpenAICompatibleChat(
            provider_name=self.profile.provider_name,
            label=self.profile.label,
            client_getter=lambda: self.client,
            logger=self._logger,
            think_tags=self.profile.think_tags,
            usage_parser=self.profile.usage_parser,
        )

    @property
    def provider_name(self) -> str:
        return self.profile.provider_name

    # ---- Client ----
    @property
    def client(self):
        if self._client is None:
            self._client = self._make_client()
        return self._client

    def _base_url(self) -> Optional[str]:
        return self.settings.base_url or self.profile.default_base_url

    def _make_client(self):
        if OpenAI is None:
            raise completion_error(
                self.profile.label, RuntimeError("openai SDK not installed"), provider=self.profile.provider_name
            )
        return OpenAI(
            api_key=self.settings.api_key or "not-provided",
            base_url=self._base_url(),
            default_headers=dict(self.settings.headers) or None,
        )

    # ---- Models ----
    def _models(self) -> Mapping[str, ModelInfo]:
        if self._catalog is None:
            return self.profile.models
        cached = self._catalog.get_models_from_cache(self.profile.provider_name) or {}
        return {**self.profile.models, **cached}

    def get_model(self) -> ModelSelection:
        return select_model(
            self.settings.model_id,
            self._models(),
            self.profile.default_model_id,
            self.profile.fallback_info,
        )

    def fetch_model(self) -> ModelSelection:
        """Refresh the dynamic catalog (when configured) and resolve the model."""
        if self._catalog is not None:
            try:
                self._catalog.get_models(self.profile.provider_name)
            except Exception as e:
                err = completion_error(self.profile.label, e, provider=self.profile.provider_name)
                log_provider_error(self._logger, err, operation="fetch_model")
                raise err from e
        return self.get_model()

    # ---- Hooks ----
    def _default_temperature(self, selection: ModelSelection) -> Optional[float]:
        return self.profile.default_temperature

    def _convert_messages(
        self, selection: ModelSelection, system_prompt: str, messages: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        return None

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        """Add effort reasoning for models that declare it."""
        reasoning = get_model_params(
            "openai", selection.id, selection.info, self.settings, self._default_temperature(selection)
        ).reasoning
        if reasoning:
            params.update(reasoning)

    def _request_options(self, selection: ModelSelection, metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        return None

    def _stream_hooks(self, selection: ModelSelection, params: Mapping[str, Any]) -> Dict[str, Any]:
        """Extra keyword arguments for :meth:`OpenAICompatibleChat.stream`."""
        return {}

    def _uses_think_tags(self, selection: ModelSelection) -> Optional[bool]:
        return None

    # ---- Requests ----
    def build_params(
        self,
        selection: ModelSelection,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        params = self._chat.build_params(
            model_id=selection.id,
            info=selection.info,
            settings=self.settings,
            system_prompt=system_prompt,
            messages=messages,
            metadata=metadata,
            default_temperature=self._default_temperature(selection),
            converted_messages=self._convert_messages(selection, system_prompt, messages),
        )
        self._extra_params(selection, params)
        return params

    def create_message(
        self,
        system_prompt: str,
        messages: Sequence[Mapping[str, Any]],
        metadata: Optional[Mapping[str, Any]] = None,
    ) -> Iterator[StreamEvent]:
        meta = metadata or {}
        selection = self.fetch_model()
        params = self.build_params(selection, system_prompt, messages, meta)
        yield from self._chat.stream(
            params,
            info=selection.info,
            system_prompt=system_prompt,
            messages=messages,
            metadata=meta,
            request_options=self._request_options(selection, meta),
            think_tags=self._uses_think_tags(selection),
            cost_fn=self.profile.cost_fn,
            **self._stream_hooks(selection, params),
        )

    def complete_prompt(self, prompt: str) -> str:
        selection = self.fetch_model()
        body: Dict[str, Any] = {"model": selection.id, "messages": [{"role": "user", "content": prompt}]}
        return self._chat.complete(body)


__all__ = ["BaseOpenAICompatibleHandler", "CompatibleProviderProfile"]
