"""Ollama-hosted game master via LiteLLM."""
from __future__ import annotations

import json
import logging
import urllib.request
from typing import Any

from glitch_city.llm.output_parser import OutputParser
from glitch_city.llm.provider import LLMProvider, ProviderError

logger = logging.getLogger(__name__)

JSON_ONLY_SUFFIX = "\n\nYou MUST respond with a single valid JSON object only. No other text."


class OllamaProvider(LLMProvider):
    def __init__(self, model: str = "mistral", base_url: str = "http://localhost:11434",
                 num_ctx: int = 4096):
        self._model = model
        self.base_url = base_url
        self._litellm_model = f"ollama/{model}"
        self._num_ctx = num_ctx

    def generate(self, prompt: str, system_prompt: str | None = None,
                 temperature: float = 0.8, max_tokens: int = 512) -> str:
        import litellm

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        try:
            response = litellm.completion(
                model=self._litellm_model,
                messages=messages,
                temperature=temperature,
                max_tokens=max_tokens,
                api_base=self.base_url,
                num_ctx=self._num_ctx,
                response_format={"type": "json_object"},
            )
        except Exception as e:
            raise ProviderError(f"LLM generation failed: {e}") from e
        text = response.choices[0].message.content or ""
        if not text.strip():
            raise ProviderError("LLM returned an empty response")
        return text

    def generate_json(self, prompt: str, system_prompt: str | None = None,
                      temperature: float = 0.8, max_tokens: int = 512) -> dict[str, Any]:
        text = self.generate(prompt, (system_prompt or "") + JSON_ONLY_SUFFIX, temperature, max_tokens)
        parsed = OutputParser.extract_json_from_text(text)
        if parsed is None:
            logger.warning(f"Failed to parse JSON from LLM: {text[:100]}...")
            raise ProviderError("LLM response contained no JSON object")
        return parsed

    def is_available(self) -> bool:
        try:
            req = urllib.request.Request(f"{self.base_url}/api/tags")
            with urllib.request.urlopen(req, timeout=5) as resp:
                data = json.loads(resp.read())
        except (OSError, ValueError):
            return False
        models = [m.get("name", "").split(":")[0] for m in data.get("models", [])]
        return self._model in models

    @property
    def model_name(self) -> str:
        return self._model
