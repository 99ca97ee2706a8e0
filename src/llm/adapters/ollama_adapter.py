# src/llm/adapters/ollama_adapter.py — v3
"""Ollama adapter for self-hosted models.

Needs no API key, only a reachable host, so it stays available when no cloud
credentials are configured. JSON mode passes ``format="json"``, which makes
Ollama constrain decoding to valid JSON.
"""

from __future__ import annotations

import time
from typing import Any

from careerpath.llm.base_client import BaseLLMClient, elapsed_ms
from careerpath.llm.models import LLMResponse, Message


class OllamaAdapter(BaseLLMClient):
    def __init__(
        self, model: str = "llama3", host: str = "http://localhost:11434", **kwargs: Any,
    ):
        self._model = model
        self._host = host

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        import ollama

        client = ollama.AsyncClient(host=self._host)
        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]

        started = time.monotonic()
        resp = await client.chat(
            model=self._model,
            messages=chat,
            options={"num_predict": max_tokens, "temperature": temperature},
            format="json" if expect_json else "",
        )
        return LLMResponse(
            content=resp["message"]["content"],
            input_tokens=resp.get("prompt_eval_count", 0) or 0,
            output_tokens=resp.get("eval_count", 0) or 0,
            model=self._model,
            provider=self.provider_name,
            latency_ms=elapsed_ms(started),
        )

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model
