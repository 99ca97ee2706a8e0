# src/llm/adapters/openai_adapter.py — v3
"""OpenAI chat-completions adapter.

``base_url`` points it at any OpenAI-compatible gateway. JSON mode uses
``response_format={"type": "json_object"}``, which OpenAI only accepts when
the prompt itself mentions JSON; the generator's system prompt does.
"""

from __future__ import annotations

import time
from typing import Any

from careerpath.llm.base_client import BaseLLMClient, elapsed_ms
from careerpath.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(api_key=self._api_key, base_url=self._base_url)
        chat = [{"role": "system", "content": system}] if system else []
        chat += [{"role": m.role, "content": m.content} for m in messages]

        request: dict[str, Any] = {
            "model": self._model,
            "messages": chat,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if expect_json:
            request["response_format"] = {"type": "json_object"}

        started = time.monotonic()
        resp = await client.chat.completions.create(**request)
        usage = resp.usage
        return LLMResponse(
            content=resp.choices[0].message.content or "",
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider=self.provider_name,
            latency_ms=elapsed_ms(started),
        )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model
