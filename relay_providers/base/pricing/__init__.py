"""Cost accounting for vendor-reported token usage."""

from .cost import (
    ApiCost,
    calculate_api_cost_anthropic,
    calculate_api_cost_openai,
    calculate_tiered_cost,
    select_pricing_tier,
)

__all__ = [
    "ApiCost",
    "calculate_api_cost_anthropic",
    "calculate_api_cost_openai",
    "calculate_tiered_cost",
    "select_pricing_tier",
]
