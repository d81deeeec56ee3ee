"""
Relay Base Package

Provider-agnostic machinery shared by every handler:

- Interfaces: the handler capability Protocols
- Models: model descriptors and per-handler settings
- Streaming: uniform events, tag matcher, tool-call accumulator, adapter loop
- Pricing and params: cost accounting and the capability/parameter resolver
- Factory: lazy creation of handlers by provider key
"""

from .factory import ProviderFactory, UnknownProviderError, create_provider
from .interfaces import ApiHandler, ModelCatalogSource, SupportsCompletePrompt, SupportsCountTokens
from .models import ModelInfo, ModelSelection, ModelTier, ProviderSettings, resolve_settings, select_model
from .errors import ErrorCode, ProviderError, classify_exception, completion_error
from .cancellation import CancellationToken, CancelledError
from .timeouts import TimeoutConfig, get_timeout_config
from .pricing import ApiCost, calculate_api_cost_anthropic, calculate_api_cost_openai, calculate_tiered_cost
from .params import ModelParams, get_model_max_output_tokens, get_model_params
from .catalog import ModelCatalogCache
from .usage import estimate_usage
from .streaming import (
    BaseStreamingAdapter,
    GroundingEvent,
    GroundingSource,
    ReasoningEvent,
    StreamController,
    StreamEvent,
    StreamMetrics,
    TagMatcher,
    TextEvent,
    ToolCallAccumulator,
    ToolCallEvent,
    ToolCallPartialEvent,
    UsageEvent,
)

__all__ = [
    # Factory
    "ProviderFactory",
    "UnknownProviderError",
    "create_provider",
    # Interfaces
    "ApiHandler",
    "ModelCatalogSource",
    "SupportsCompletePrompt",
    "SupportsCountTokens",
    # Models
    "ModelInfo",
    "ModelSelection",
    "ModelTier",
    "ProviderSettings",
    "resolve_settings",
    "select_model",
    # Errors / cancellation / timeouts
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "completion_error",
    "CancellationToken",
    "CancelledError",
    "TimeoutConfig",
    "get_timeout_config",
    # Pricing / params
    "ApiCost",
    "calculate_api_cost_anthropic",
    "calculate_api_cost_openai",
    "calculate_tiered_cost",
    "ModelParams",
    "get_model_max_output_tokens",
    "get_model_params",
    "ModelCatalogCache",
    "estimate_usage",
    # Streaming
    "BaseStreamingAdapter",
    "GroundingEvent",
    "GroundingSource",
    "ReasoningEvent",
    "StreamController",
    "StreamEvent",
    "StreamMetrics",
    "TagMatcher",
    "TextEvent",
    "ToolCallAccumulator",
    "ToolCallEvent",
    "ToolCallPartialEvent",
    "UsageEvent",
]
