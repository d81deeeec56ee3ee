"""RooHandler adapter.

Roo Code Cloud is an OpenAI-compatible proxy authenticated with a session
token rather than a static key. The token comes from an injected
:class:`AuthService`; without one (or when signed out) requests are sent as
``"unauthenticated"`` and the proxy answers 401, which surfaces as an
``AUTH`` :class:`ProviderError`.

Key behaviors:
* The token is read from the auth service before every request. A changed
  token (or an ``auth-state-changed`` notification) swaps in a new client;
  in-flight streams keep the client they started with.
  :meth:`RooHandler.dispose` unsubscribes.
* ``metadata["task_id"]`` is forwarded as the ``X-Roo-Task-ID`` header.
* Reasoning uses the Roo ``reasoning`` payload (``enabled``/``effort``).
* Cost comes from the proxy's ``usage.cost``; models tagged free cost 0.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Dict, Mapping, Optional

try:
    from openai import OpenAI
except Exception:  # pragma: no cover
    OpenAI = None  # type: ignore

from ..base.catalog import ModelCatalogCache
from ..base.errors import completion_error
from ..base.logging import log_event
from ..base.models import ModelInfo, ModelSelection
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile, parse_chat_usage
from ..base.params import get_model_params
from ..base.streaming import UsageEvent
from ..base.utils import attr_or_key
from ..config.defaults import ROO_DEFAULT_BASE_URL
from .auth import AUTH_STATE_CHANGED, AuthService
from .get_roo_models import fetch_roo_models
from .models import ROO_DEFAULT_MODEL_ID, ROO_FALLBACK_MODEL_INFO, ROO_MODELS

ROO_DEFAULT_TEMPERATURE = 0.7
UNAUTHENTICATED = "unauthenticated"
TASK_ID_HEADER = "X-Roo-Task-ID"


def parse_roo_usage(usage: Any) -> Optional[UsageEvent]:
    """Chat usage plus the proxy's ``cache_creation_input_tokens``."""
    event = parse_chat_usage(usage)
    if event is None:
        return None
    return replace(event, cache_write_tokens=attr_or_key(usage, "cache_creation_input_tokens"))


def roo_usage_cost(info: ModelInfo, usage: UsageEvent, raw_usage: Any = None) -> float:
    if info.is_free:
        return 0.0
    return float(attr_or_key(raw_usage, "cost", 0.0))


class RooHandler(BaseOpenAICompatibleHandler):
    """Roo Code Cloud handler.

    Args:
        settings: Per-handler settings.
        client: Optional pre-built ``openai.OpenAI`` client.
        catalog: Optional model catalog; defaults to a cache over the proxy
            listing.
        auth_service: Session-token source; may be ``None``.
    """

    profile = CompatibleProviderProfile(
        provider_name="roo",
        label="Roo Code Cloud",
        default_model_id=ROO_DEFAULT_MODEL_ID,
        models=ROO_MODELS,
        default_base_url=ROO_DEFAULT_BASE_URL,
        default_temperature=ROO_DEFAULT_TEMPERATURE,
        think_tags=False,
        requires_api_key=False,
        fallback_info=ROO_FALLBACK_MODEL_INFO,
        usage_parser=parse_roo_usage,
        cost_fn=roo_usage_cost,
    )

    def __init__(
        self,
        settings=None,
        client: Any = None,
        catalog=None,
        auth_service: Optional[AuthService] = None,
    ) -> None:
        super().__init__(settings=settings, client=client, catalog=catalog)
        self._auth = auth_service
        self._owns_client = client is None
        self._client_token: Optional[str] = None
        self._listener: Optional[Callable[[Any], None]] = None
        if self._catalog is None:
            self._catalog = ModelCatalogCache(
                {"roo": lambda: fetch_roo_models(self._base_url(), self._session_token())}
            )
        if self._auth is not None:
            self._listener = self._on_auth_state_changed
            self._auth.on(AUTH_STATE_CHANGED, self._listener)

    def _session_token(self) -> Optional[str]:
        if self._auth is None:
            return None
        return self._auth.get_session_token()

    def _on_auth_state_changed(self, state: Any = None) -> None:
        log_event(self._logger, "auth.state_changed", provider=self.provider_name, state=str(state))
        if self._owns_client:
            token = self._session_token() or UNAUTHENTICATED
            self._client = self._build_client(token)

    @property
    def client(self):
        token = self._session_token() or UNAUTHENTICATED
        if self._client is None or (self._owns_client and token != self._client_token):
            self._client = self._build_client(token)
        return self._client

    def dispose(self) -> None:
        """Stop listening for auth changes."""
        if self._auth is not None and self._listener is not None:
            self._auth.off(AUTH_STATE_CHANGED, self._listener)
            self._listener = None

    def _base_url(self) -> Optional[str]:
        base = (self.settings.base_url or ROO_DEFAULT_BASE_URL).rstrip("/")
        return base if base.endswith("/v1") else f"{base}/v1"

    def _build_client(self, token: str):
        if OpenAI is None:
            raise completion_error(self.profile.label, RuntimeError("openai SDK not installed"), provider="roo")
        self._client_token = token
        return OpenAI(
            api_key=token,
            base_url=self._base_url(),
            default_headers=dict(self.settings.headers) or None,
        )

    def fetch_model(self) -> ModelSelection:
        """Refresh the catalog; a failed refresh keeps the cached or fallback model."""
        try:
            self._catalog.get_models(self.provider_name)
        except Exception as e:
            log_event(self._logger, "catalog.refresh_failed", provider=self.provider_name, error=str(e))
        return self.get_model()

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        reasoning = get_model_params(
            "roo", selection.id, selection.info, self.settings, ROO_DEFAULT_TEMPERATURE
        ).reasoning
        if reasoning:
            params["reasoning"] = reasoning

    def _request_options(self, selection: ModelSelection, metadata: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        task_id = metadata.get("task_id")
        if not task_id:
            return None
        return {"extra_headers": {TASK_ID_HEADER: task_id}}


__all__ = ["RooHandler", "parse_roo_usage", "roo_usage_cost"]
