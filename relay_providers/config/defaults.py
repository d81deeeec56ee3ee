"""relay_providers.config.defaults
================================

Central place for the stable default values used across relay_providers.
Handlers and the parameter resolver read these constants instead of
embedding literals, so product decisions (temperature defaults, token caps,
the model families exempt from the output cap) live in one place and can be
reviewed or patched in tests.

This module must not import from provider packages; only plain constants
belong here.
"""

from __future__ import annotations

# ---- Anthropic ----
# Messages API default model when neither settings nor env choose one.
ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-5"
# Output-token ceiling used for Anthropic-family contexts (see resolver).
ANTHROPIC_DEFAULT_MAX_TOKENS = 8192
# Betas always requested on streaming calls.
ANTHROPIC_DEFAULT_BETAS = ("fine-grained-tool-streaming-2025-05-14",)
# Beta enabling prompt caching on models that support it.
ANTHROPIC_PROMPT_CACHING_BETA = "prompt-caching-2024-07-31"

# ---- OpenAI Responses ("openai-native") ----
OPENAI_DEFAULT_MODEL = "gpt-5.1"
# Temperature sent when the model supports it and the user chose none.
OPENAI_NATIVE_DEFAULT_TEMPERATURE = 0.0
# Retention window requested for models that support extended prompt caching.
OPENAI_PROMPT_CACHE_RETENTION = "24h"

# ---- OpenRouter ----
OPENROUTER_DEFAULT_MODEL = "anthropic/claude-sonnet-4.5"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
# Attribution headers sent on every OpenRouter request.
OPENROUTER_DEFAULT_HEADERS = {
    "HTTP-Referer": "https://github.com/relay-providers/relay-providers",
    "X-Title": "relay-providers",
}

# ---- Google Gemini ----
GEMINI_DEFAULT_MODEL = "gemini-2.5-pro"
# Temperature used when neither the user nor the model provides one.
GEMINI_FALLBACK_TEMPERATURE = 1.0

# ---- Mistral ----
MISTRAL_DEFAULT_MODEL = "codestral-latest"
MISTRAL_DEFAULT_BASE_URL = "https://api.mistral.ai"
# Codestral models are served from a dedicated host.
MISTRAL_CODESTRAL_BASE_URL = "https://codestral.mistral.ai"
MISTRAL_DEFAULT_TEMPERATURE = 1.0

# ---- DeepSeek ----
DEEPSEEK_DEFAULT_MODEL = "deepseek-chat"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com"
DEEPSEEK_DEFAULT_TEMPERATURE = 0.6

# ---- xAI ----
XAI_DEFAULT_MODEL = "grok-code-fast-1"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"

# ---- MiniMax ----
MINIMAX_DEFAULT_MODEL = "MiniMax-M2"
MINIMAX_DEFAULT_BASE_URL = "https://api.minimax.io/v1"
MINIMAX_DEFAULT_TEMPERATURE = 1.0

# ---- Z AI ----
ZAI_DEFAULT_MODEL = "glm-4.6"
ZAI_DEFAULT_TEMPERATURE = 0.6
# API line -> (base URL, serves the mainland China catalog)
ZAI_API_LINES = {
    "international_coding": ("https://api.z.ai/api/coding/paas/v4", False),
    "china_coding": ("https://open.bigmodel.cn/api/coding/paas/v4", True),
}

# ---- Chutes ----
CHUTES_DEFAULT_MODEL = "deepseek-ai/DeepSeek-R1-0528"
CHUTES_DEFAULT_BASE_URL = "https://llm.chutes.ai/v1"
# Non-R1 Chutes models; R1 models use DEEPSEEK_DEFAULT_TEMPERATURE.
CHUTES_DEFAULT_TEMPERATURE = 0.5

# ---- Baseten ----
BASETEN_DEFAULT_MODEL = "zai-org/GLM-4.6"
BASETEN_DEFAULT_BASE_URL = "https://inference.baseten.co/v1"
BASETEN_DEFAULT_TEMPERATURE = 0.5

# ---- Unbound ----
UNBOUND_DEFAULT_MODEL = "anthropic/claude-sonnet-4-5"
UNBOUND_DEFAULT_BASE_URL = "https://api.getunbound.ai/v1"
# Catalog listing lives outside the versioned API path.
UNBOUND_MODELS_URL = "https://api.getunbound.ai/models"
UNBOUND_METADATA_HEADER = "X-Unbound-Metadata"
UNBOUND_ORIGIN_APP = "roo-code"
# Output cap applied to anthropic/ catalog entries that do not report 4096.
UNBOUND_ANTHROPIC_MAX_TOKENS = 8192

# ---- Roo Code Cloud ----
ROO_DEFAULT_MODEL = "xai/grok-code-fast-1"
ROO_DEFAULT_BASE_URL = "https://api.roocode.com/proxy/v1"

# ---- Cerebras ----
CEREBRAS_DEFAULT_MODEL = "gpt-oss-120b"
CEREBRAS_DEFAULT_BASE_URL = "https://api.cerebras.ai/v1"
# max_completion_tokens above this value is rejected by the API and omitted.
CEREBRAS_MAX_COMPLETION_TOKENS = 32768
# Accepted temperature range.
CEREBRAS_TEMPERATURE_RANGE = (0.0, 1.5)
CEREBRAS_DEFAULT_TEMPERATURE = 0.0
# Integration header required by the vendor for third-party clients.
CEREBRAS_INTEGRATION_HEADER = ("X-Cerebras-3rd-Party-Integration", "roocode")

# ---- Parameter resolver ----
# Max tokens used when budgeted reasoning is active and settings give none.
DEFAULT_HYBRID_REASONING_MODEL_MAX_TOKENS = 16_384
# Reasoning budget used when settings give none.
DEFAULT_HYBRID_REASONING_MODEL_THINKING_TOKENS = 8_192
# Smallest reasoning budget any vendor accepts.
MIN_REASONING_BUDGET_TOKENS = 1_024
# gemini-2.5-pro accepts budgets down to this value.
GEMINI_25_PRO_MIN_THINKING_TOKENS = 128
# Share of max tokens a reasoning budget may consume.
REASONING_BUDGET_MAX_RATIO = 0.8
# Share of the context window an explicit model maxTokens is clamped to.
MAX_OUTPUT_CONTEXT_RATIO = 0.2
# Lowercase substrings of model ids exempt from the context-share clamp.
MAX_OUTPUT_CAP_EXEMPT_FAMILIES = ("gpt-5",)
# Claude Code routed configurations.
CLAUDE_CODE_PROVIDER = "claude-code"
CLAUDE_CODE_DEFAULT_MAX_OUTPUT_TOKENS = 16_000

# ---- Fallback usage estimation ----
# Characters per token for prompt-length estimates.
ESTIMATE_CHARS_PER_TOKEN = 4
# Divisor applied to max tokens for output estimates.
ESTIMATE_OUTPUT_DIVISOR = 10

# ---- Local token counting ----
# tiktoken encodings tried in order.
TOKENIZER_ENCODINGS = ("o200k_base", "cl100k_base")
# Image block cost when the block carries no inline data.
IMAGE_DEFAULT_TOKENS = 300
# Safety margin applied to local counts.
TOKEN_FUDGE_FACTOR = 1.5

# ---- Model catalog cache ----
# In-memory TTL for fetched model catalogs.
MODEL_CACHE_TTL_SECONDS = 300.0
