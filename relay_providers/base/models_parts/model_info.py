"""
Model descriptor DTOs.

``ModelInfo`` captures what a handler needs to know about a model: limits,
capability flags that drive the parameter resolver, and per-million-token
prices that drive cost accounting. Instances are immutable; handlers derive
request parameters from them and never modify them (``dataclasses.replace``
produces priced variants for tier selection).
"""
from __future__ import annotations

import math
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

ReasoningEffortSupport = Union[bool, Tuple[str, ...]]

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name).lower()


def _normalize_keys(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept camelCase catalog payloads alongside snake_case ones."""
    return {_snake(k): v for k, v in data.items()}


def _coerce_window(value: Any) -> float:
    if value is None:
        return math.inf
    if isinstance(value, str) and value.lower() in {"inf", "infinity"}:
        return math.inf
    return float(value)


@dataclass(frozen=True)
class ModelTier:
    """A pricing tier.

    Attributes:
        context_window: Upper bound (inclusive) of input tokens this tier
            covers. ``math.inf`` marks the catch-all tier.
        name: Service-tier name (``"flex"``, ``"priority"``) for name-matched
            tiers; ``None`` for context-threshold tiers.
        input_price, output_price, cache_writes_price, cache_reads_price:
            Overrides for the base prices; ``None`` falls back to the base.
    """

    context_window: float = math.inf
    name: Optional[str] = None
    input_price: Optional[float] = None
    output_price: Optional[float] = None
    cache_writes_price: Optional[float] = None
    cache_reads_price: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelTier":
        d = _normalize_keys(data)
        return cls(
            context_window=_coerce_window(d.get("context_window")),
            name=d.get("name"),
            input_price=d.get("input_price"),
            output_price=d.get("output_price"),
            cache_writes_price=d.get("cache_writes_price"),
            cache_reads_price=d.get("cache_reads_price"),
        )


@dataclass(frozen=True)
class ModelInfo:
    """Immutable model descriptor.

    Only ``context_window`` is required; every capability defaults to "not
    supported" and every price to unknown (billed as 0).
    """

    context_window: int
    max_tokens: Optional[int] = None
    max_thinking_tokens: Optional[int] = None
    supports_images: bool = False
    supports_prompt_cache: bool = False
    prompt_cache_retention: Optional[str] = None
    supports_native_tools: bool = False
    supports_verbosity: bool = False
    supports_temperature: Optional[bool] = None
    default_temperature: Optional[float] = None
    supports_reasoning_budget: bool = False
    required_reasoning_budget: bool = False
    supports_reasoning_binary: bool = False
    supports_reasoning_effort: ReasoningEffortSupport = False
    required_reasoning_effort: bool = False
    reasoning_effort: Optional[str] = None
    preserve_reasoning: bool = False
    input_price: Optional[float] = None
    output_price: Optional[float] = None
    cache_writes_price: Optional[float] = None
    cache_reads_price: Optional[float] = None
    tiers: Tuple[ModelTier, ...] = field(default_factory=tuple)
    is_free: bool = False
    description: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ModelInfo":
        """Build a descriptor from a catalog payload (camelCase or snake_case).

        Unknown keys are ignored so richer catalogs do not break parsing.
        """
        d = _normalize_keys(data)
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in d.items() if k in known}
        effort = kwargs.get("supports_reasoning_effort")
        if isinstance(effort, (list, tuple)):
            kwargs["supports_reasoning_effort"] = tuple(effort)
        raw_tiers: Sequence[Any] = kwargs.pop("tiers", None) or ()
        kwargs["tiers"] = tuple(t if isinstance(t, ModelTier) else ModelTier.from_dict(t) for t in raw_tiers)
        # missing or null windows mean "unknown"
        if kwargs.get("context_window") is None:
            kwargs["context_window"] = 0
        return cls(**kwargs)

    def supports_effort(self, effort: Optional[str] = None) -> bool:
        """Whether the model accepts ``effort`` (any effort when omitted)."""
        support = self.supports_reasoning_effort
        if isinstance(support, tuple):
            return bool(support) if effort is None else effort in support
        return bool(support)


@dataclass(frozen=True)
class ModelSelection:
    """Result of ``get_model()``: the resolved id and its descriptor."""

    id: str
    info: ModelInfo


__all__ = ["ModelInfo", "ModelTier", "ModelSelection", "ReasoningEffortSupport"]
