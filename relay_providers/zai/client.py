"""ZAiHandler adapter.

The configured API line (``settings.extra["zai_api_line"]``) picks both the
endpoint and the catalog: ``china_coding`` serves the mainland table,
everything else the international one. Z AI accepts keyless requests on
some plans, so a missing key is sent as ``"not-provided"`` instead of being
rejected.

Binary-reasoning models (``glm-4.5``, ``glm-4.6``) receive
``thinking={"type": "enabled"}`` when the user enabled reasoning; this
applies to streaming and one-shot completions alike.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Tuple

from ..base.errors import ErrorCode, ProviderError
from ..base.models import ModelInfo, ModelSelection, select_model
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..config.defaults import ZAI_API_LINES, ZAI_DEFAULT_TEMPERATURE
from .models import INTERNATIONAL_ZAI_MODELS, MAINLAND_ZAI_MODELS, ZAI_DEFAULT_MODEL_ID

DEFAULT_API_LINE = "international_coding"


def resolve_api_line(line: Optional[str]) -> Tuple[str, bool]:
    """Return ``(base_url, is_china)`` for an API line name.

    Raises:
        ProviderError: ``VALIDATION`` for an unknown line.
    """
    name = line or DEFAULT_API_LINE
    if name not in ZAI_API_LINES:
        raise ProviderError(
            code=ErrorCode.VALIDATION,
            message=f"Unknown Z AI API line '{name}' (expected one of: {', '.join(ZAI_API_LINES)})",
            provider="zai",
        )
    return ZAI_API_LINES[name]


class ZAiHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="zai",
        label="Z AI",
        default_model_id=ZAI_DEFAULT_MODEL_ID,
        models=INTERNATIONAL_ZAI_MODELS,
        default_temperature=ZAI_DEFAULT_TEMPERATURE,
        requires_api_key=False,
    )

    def __init__(self, settings=None, client=None, catalog=None) -> None:
        super().__init__(settings=settings, client=client, catalog=catalog)
        self._line_url, self._is_china = resolve_api_line(self.settings.extra.get("zai_api_line"))

    @property
    def is_china(self) -> bool:
        return self._is_china

    def _base_url(self) -> Optional[str]:
        return self.settings.base_url or self._line_url

    def _models(self) -> Mapping[str, ModelInfo]:
        return MAINLAND_ZAI_MODELS if self._is_china else INTERNATIONAL_ZAI_MODELS

    def get_model(self) -> ModelSelection:
        return select_model(self.settings.model_id, self._models(), ZAI_DEFAULT_MODEL_ID)

    def _thinking(self, info: ModelInfo) -> Optional[Dict[str, Any]]:
        if self.settings.enable_reasoning_effort and info.supports_reasoning_binary:
            return {"type": "enabled"}
        return None

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        thinking = self._thinking(selection.info)
        if thinking:
            params["thinking"] = thinking

    def complete_prompt(self, prompt: str) -> str:
        selection = self.get_model()
        body: Dict[str, Any] = {"model": selection.id, "messages": [{"role": "user", "content": prompt}]}
        self._extra_params(selection, body)
        return self._chat.complete(body)


__all__ = ["ZAiHandler", "resolve_api_line"]
