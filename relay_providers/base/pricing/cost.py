"""Token cost accounting.

Prices on :class:`ModelInfo` are USD per million tokens. Two conventions exist
because vendors disagree on what "input tokens" means:

* **Non-cache-inclusive** (Anthropic family): reported input excludes cache
  writes and reads, so all three are billed separately and summed for the
  total input count.
* **Cache-inclusive** (OpenAI family): reported input already contains the
  cached tokens, so the billable uncached remainder is
  ``max(0, input - cache_write - cache_read)`` and the total is unchanged.

A missing price is billed as 0, never ``NaN``.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Optional

from ..models import ModelInfo, ModelTier

_PER_MILLION = 1_000_000


@dataclass(frozen=True)
class ApiCost:
    """Cost breakdown for one response."""

    total_cost: float
    total_input_tokens: int
    total_output_tokens: int


def _price(value: Optional[float]) -> float:
    return float(value) if value else 0.0


def _calculate_api_cost_internal(
    info: ModelInfo,
    billable_input_tokens: int,
    output_tokens: int,
    cache_write_tokens: int,
    cache_read_tokens: int,
    total_input_tokens: int,
    total_output_tokens: int,
) -> ApiCost:
    cache_writes_cost = (_price(info.cache_writes_price) / _PER_MILLION) * cache_write_tokens
    cache_reads_cost = (_price(info.cache_reads_price) / _PER_MILLION) * cache_read_tokens
    input_cost = (_price(info.input_price) / _PER_MILLION) * billable_input_tokens
    output_cost = (_price(info.output_price) / _PER_MILLION) * output_tokens
    return ApiCost(
        total_cost=cache_writes_cost + cache_reads_cost + input_cost + output_cost,
        total_input_tokens=total_input_tokens,
        total_output_tokens=total_output_tokens,
    )


def calculate_api_cost_anthropic(
    info: ModelInfo,
    input_tokens: int,
    output_tokens: int,
    cache_write_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> ApiCost:
    """Cost for vendors whose ``input_tokens`` exclude cached tokens."""
    cache_write_tokens = cache_write_tokens or 0
    cache_read_tokens = cache_read_tokens or 0
    return _calculate_api_cost_internal(
        info,
        input_tokens,
        output_tokens,
        cache_write_tokens,
        cache_read_tokens,
        total_input_tokens=input_tokens + cache_write_tokens + cache_read_tokens,
        total_output_tokens=output_tokens,
    )


def calculate_api_cost_openai(
    info: ModelInfo,
    input_tokens: int,
    output_tokens: int,
    cache_write_tokens: int = 0,
    cache_read_tokens: int = 0,
) -> ApiCost:
    """Cost for vendors whose ``input_tokens`` already include cached tokens."""
    cache_write_tokens = cache_write_tokens or 0
    cache_read_tokens = cache_read_tokens or 0
    uncached = max(0, input_tokens - cache_write_tokens - cache_read_tokens)
    return _calculate_api_cost_internal(
        info,
        uncached,
        output_tokens,
        cache_write_tokens,
        cache_read_tokens,
        total_input_tokens=input_tokens,
        total_output_tokens=output_tokens,
    )


def _apply_tier(info: ModelInfo, tier: ModelTier) -> ModelInfo:
    def pick(tier_value: Optional[float], base: Optional[float]) -> Optional[float]:
        return tier_value if tier_value is not None else base

    return dataclasses.replace(
        info,
        input_price=pick(tier.input_price, info.input_price),
        output_price=pick(tier.output_price, info.output_price),
        cache_writes_price=pick(tier.cache_writes_price, info.cache_writes_price),
        cache_reads_price=pick(tier.cache_reads_price, info.cache_reads_price),
    )


def select_pricing_tier(
    info: ModelInfo,
    input_tokens: Optional[int] = None,
    service_tier: Optional[str] = None,
) -> ModelInfo:
    """Return ``info`` with prices substituted from the matching tier.

    A named service tier (anything but ``"default"``) is matched by name.
    Otherwise the first context-threshold tier, in declared order, whose
    ``context_window`` is ``>= input_tokens`` wins. Fields absent from the
    tier keep the base price; no match keeps the base prices.
    """
    if not info.tiers:
        return info
    if service_tier and service_tier != "default":
        for tier in info.tiers:
            if tier.name == service_tier:
                return _apply_tier(info, tier)
        return info
    if input_tokens is None:
        return info
    for tier in info.tiers:
        if tier.name is None and input_tokens <= tier.context_window:
            return _apply_tier(info, tier)
    return info


def calculate_tiered_cost(
    info: ModelInfo,
    input_tokens: int,
    output_tokens: int,
    cache_read_tokens: int = 0,
    reasoning_tokens: int = 0,
) -> ApiCost:
    """Cost for context-tiered vendors (Gemini).

    ``input_tokens`` includes cached tokens; reasoning tokens are reported
    separately by the vendor and billed at the output price.
    """
    priced = select_pricing_tier(info, input_tokens=input_tokens)
    total_output = output_tokens + (reasoning_tokens or 0)
    return calculate_api_cost_openai(
        priced,
        input_tokens,
        total_output,
        cache_write_tokens=0,
        cache_read_tokens=cache_read_tokens or 0,
    )


__all__ = [
    "ApiCost",
    "calculate_api_cost_anthropic",
    "calculate_api_cost_openai",
    "calculate_tiered_cost",
    "select_pricing_tier",
]
