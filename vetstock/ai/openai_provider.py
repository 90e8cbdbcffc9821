"""Proveedor remoto OpenAI.

Usa la librería oficial ``openai`` (>=1.x) en modo de respuesta JSON.
Sin reintentos: cualquier error se propaga como ``ProviderError`` y el
servicio de sugerencias decide cómo informarlo.
"""

import json
import logging
from typing import Any, Dict

from openai import OpenAI

from ..exceptions import ProviderError
from .provider_base import SuggestionProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Eres un asistente de inventario que responde solo con JSON válido."


class OpenAIProvider(SuggestionProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str = "gpt-4.1-mini", timeout: float = 60.0) -> None:
        self.api_key = api_key or ""
        self.model = model
        self.timeout = timeout
        self._client = None

    def _get_client(self) -> OpenAI:
        if not self.api_key:
            raise ProviderError("OPENAI_API_KEY no configurada")
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def complete_json(self, prompt: str) -> Dict[str, Any]:
        client = self._get_client()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                response_format={"type": "json_object"},
            )
        except Exception as exc:
            raise ProviderError(f"Error llamando a OpenAI: {exc}") from exc

        text = resp.choices[0].message.content if resp.choices else ""
        try:
            data = json.loads(text or "")
        except json.JSONDecodeError as exc:
            raise ProviderError("La respuesta del modelo no es JSON válido") from exc
        if not isinstance(data, dict):
            raise ProviderError("La respuesta del modelo no es un objeto JSON")
        logger.debug("Respuesta OpenAI (%s): %s", self.model, data)
        return data
