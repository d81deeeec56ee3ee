"""ChutesHandler adapter.

Chutes routes to many open models behind one OpenAI-compatible endpoint.
The model table is refreshed through a :class:`ModelCatalogCache` before each
request (a default cache over :func:`fetch_chutes_models` is built when none
is injected); unknown ids fall back to the default DeepSeek R1 model.

DeepSeek-R1 models take a dedicated path: the system prompt is sent as the
first user turn in R1 format, ``<think>`` spans in content become reasoning
and the temperature defaults to 0.6. Other models stream content verbatim
with a default temperature of 0.5.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..base.catalog import ModelCatalogCache
from ..base.models import ModelSelection
from ..base.openai_compat import BaseOpenAICompatibleHandler, CompatibleProviderProfile
from ..base.params import get_model_max_output_tokens
from ..base.transform import convert_to_r1_format
from ..config.defaults import CHUTES_DEFAULT_BASE_URL, CHUTES_DEFAULT_TEMPERATURE, DEEPSEEK_DEFAULT_TEMPERATURE
from .get_chutes_models import fetch_chutes_models
from .models import CHUTES_DEFAULT_MODEL_ID, CHUTES_MODELS

# Reasoning models that reject the temperature parameter.
_NO_TEMPERATURE_PREFIXES = ("openai/o3-mini",)


def is_deepseek_r1(model_id: str) -> bool:
    return "DeepSeek-R1" in model_id


class ChutesHandler(BaseOpenAICompatibleHandler):
    profile = CompatibleProviderProfile(
        provider_name="chutes",
        label="Chutes",
        default_model_id=CHUTES_DEFAULT_MODEL_ID,
        models=CHUTES_MODELS,
        default_base_url=CHUTES_DEFAULT_BASE_URL,
        default_temperature=CHUTES_DEFAULT_TEMPERATURE,
        think_tags=False,
    )

    def __init__(self, settings=None, client=None, catalog=None) -> None:
        super().__init__(settings=settings, client=client, catalog=catalog)
        if self._catalog is None:
            api_key, base_url = self.settings.api_key, self._base_url()
            self._catalog = ModelCatalogCache({"chutes": lambda: fetch_chutes_models(api_key, base_url)})

    def _supports_temperature(self, model_id: str) -> bool:
        return not model_id.startswith(_NO_TEMPERATURE_PREFIXES)

    def _default_temperature(self, selection: ModelSelection) -> Optional[float]:
        if not self._supports_temperature(selection.id):
            return None
        return DEEPSEEK_DEFAULT_TEMPERATURE if is_deepseek_r1(selection.id) else CHUTES_DEFAULT_TEMPERATURE

    def _convert_messages(
        self, selection: ModelSelection, system_prompt: str, messages: Sequence[Mapping[str, Any]]
    ) -> Optional[List[Dict[str, Any]]]:
        if not is_deepseek_r1(selection.id):
            return None
        return convert_to_r1_format([{"role": "user", "content": system_prompt}, *messages])

    def _extra_params(self, selection: ModelSelection, params: Dict[str, Any]) -> None:
        if not self._supports_temperature(selection.id):
            params.pop("temperature", None)

    def _uses_think_tags(self, selection: ModelSelection) -> Optional[bool]:
        return is_deepseek_r1(selection.id)

    def complete_prompt(self, prompt: str) -> str:
        selection = self.fetch_model()
        body: Dict[str, Any] = {"model": selection.id, "messages": [{"role": "user", "content": prompt}]}
        max_tokens = get_model_max_output_tokens(selection.id, selection.info, self.settings, "openai")
        if max_tokens:
            body["max_tokens"] = max_tokens
        if self._supports_temperature(selection.id):
            user = self.settings.model_temperature
            body["temperature"] = user if user is not None else self._default_temperature(selection)
        return self._chat.complete(body)


__all__ = ["ChutesHandler", "is_deepseek_r1"]
