# src/llm/adapters/google_adapter.py — v3
"""Gemini adapter, the default provider for roadmap and resource generation.

Gemini has no system role in ``contents``; the system prompt goes in as
``system_instruction`` and assistant turns are sent as "model". JSON mode
sets ``response_mime_type`` so Gemini returns a bare document instead of
fenced prose.
"""

from __future__ import annotations

import time
from typing import Any

from careerpath.llm.base_client import BaseLLMClient, elapsed_ms
from careerpath.llm.models import LLMResponse, Message


class GoogleAdapter(BaseLLMClient):
    def __init__(self, model: str = "gemini-2.5-flash", api_key: str = "", **kwargs: Any):
        self._model = model
        self._api_key = api_key

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        import google.generativeai as genai

        genai.configure(api_key=self._api_key)
        model = genai.GenerativeModel(self._model, system_instruction=system)

        generation_config: dict[str, Any] = {
            "max_output_tokens": max_tokens,
            "temperature": temperature,
        }
        if expect_json:
            generation_config["response_mime_type"] = "application/json"

        contents = [
            {"role": "model" if m.role == "assistant" else "user", "parts": [{"text": m.content}]}
            for m in messages
            if m.role != "system"
        ]

        started = time.monotonic()
        resp = await model.generate_content_async(contents, generation_config=generation_config)
        usage = getattr(resp, "usage_metadata", None)
        return LLMResponse(
            content=resp.text or "",
            input_tokens=getattr(usage, "prompt_token_count", 0) or 0,
            output_tokens=getattr(usage, "candidates_token_count", 0) or 0,
            model=self._model,
            provider=self.provider_name,
            latency_ms=elapsed_ms(started),
        )

    @property
    def provider_name(self) -> str:
        return "google"

    @property
    def model_name(self) -> str:
        return self._model
