"""Typed per-handler settings.

Purpose
-------
One provider-agnostic DTO carries credentials, model selection and the user
knobs the parameter resolver consults (token limits, temperature, reasoning
toggles). Handlers receive it from the factory; vendor-specific options that
do not warrant a field travel in ``extra``.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``model_copy`` / ``model_dump``.

Notes
-----
- ``enable_reasoning_effort`` is tri-state: ``None`` means "not chosen", which
  differs from an explicit ``False`` for effort-capable models.
- ``reasoning_effort`` accepts ``"disable"`` to suppress reasoning entirely.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from ...config import get_provider_config


class ProviderSettings(BaseModel):
    """User settings for a single handler instance.

    Attributes
    ----------
    api_key:
        Vendor credential. Handlers fall back to ``config.get_provider_config``.
    base_url:
        Endpoint override (proxies, regional hosts).
    model_id:
        Requested model id. Unknown ids fall back to the provider default.
    model_max_tokens:
        Output-token budget used when budgeted reasoning is active.
    model_max_thinking_tokens:
        Reasoning budget; clamped by the resolver.
    model_temperature:
        Explicit temperature; otherwise the handler's default applies.
    enable_reasoning_effort:
        Opt-in for budget reasoning; explicit ``False`` disables effort too.
    reasoning_effort:
        ``"minimal" | "low" | "medium" | "high" | "xhigh" | "none" | "disable"``.
    verbosity:
        Responses API text verbosity (``low | medium | high``).
    service_tier:
        Responses API service tier (``default | flex | priority``).
    include_max_tokens:
        Whether vendors with optional max-tokens (Mistral) receive one.
    use_prompt_cache:
        Anthropic prompt caching toggle (on by default when supported).
    headers:
        Extra static HTTP headers.
    extra:
        Provider-specific options (``zai_api_line``, ``anthropic_use_auth_token``...).
    """

    model_config = ConfigDict(extra="ignore", protected_namespaces=())

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model_id: Optional[str] = None
    model_max_tokens: Optional[int] = None
    model_max_thinking_tokens: Optional[int] = None
    model_temperature: Optional[float] = None
    enable_reasoning_effort: Optional[bool] = None
    reasoning_effort: Optional[str] = None
    verbosity: Optional[str] = None
    service_tier: Optional[str] = None
    include_max_tokens: bool = False
    use_prompt_cache: bool = True
    claude_code_max_output_tokens: Optional[int] = None
    openrouter_specific_provider: Optional[str] = None
    openrouter_use_middle_out: bool = True
    headers: Mapping[str, str] = Field(default_factory=dict)
    extra: Dict[str, Any] = Field(default_factory=dict)


_CONFIG_FIELDS = {"api_key": "api_key", "base_url": "base_url", "model": "model_id"}


def resolve_settings(provider: str, settings: Optional[ProviderSettings] = None) -> ProviderSettings:
    """Fill unset credential/endpoint/model fields from provider config.

    Explicit settings always win; remaining config keys that are not fields
    land in ``extra`` (``zai_api_line``, ``openrouter_use_middle_out``...).
    """
    base = settings or ProviderSettings()
    cfg = get_provider_config(provider)
    updates: Dict[str, Any] = {}
    for key, field_name in _CONFIG_FIELDS.items():
        if getattr(base, field_name) is None and cfg.get(key) is not None:
            updates[field_name] = cfg[key]
    extra = dict(base.extra)
    for key, value in cfg.items():
        if key in _CONFIG_FIELDS:
            continue
        if key in ProviderSettings.model_fields:
            if key not in base.model_fields_set:
                updates[key] = value
        else:
            extra.setdefault(key, value)
    updates["extra"] = extra
    return base.model_copy(update=updates)


__all__ = ["ProviderSettings", "resolve_settings"]
