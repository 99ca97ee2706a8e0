# src/llm/adapters/anthropic_adapter.py — v4
"""Anthropic Messages API adapter.

The Messages API has no JSON output mode, so ``expect_json`` is accepted and
ignored; the system prompt's "respond only with JSON" plus lenient extraction
downstream carry the constraint. Only text blocks make up the completion.
"""

from __future__ import annotations

import time
from typing import Any

from careerpath.llm.base_client import BaseLLMClient, elapsed_ms
from careerpath.llm.models import LLMResponse, Message


class AnthropicAdapter(BaseLLMClient):
    def __init__(
        self,
        model: str = "claude-sonnet-4-20250514",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self.__client = None

    @property
    def _client(self):
        """SDK client, created on first use so the import stays optional."""
        if self.__client is None:
            try:
                import anthropic
            except ImportError as e:
                raise ImportError(
                    "anthropic package required: pip install anthropic"
                ) from e
            self.__client = anthropic.AsyncAnthropic(api_key=self._api_key or "")
        return self.__client

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        request: dict[str, Any] = {
            "model": self._model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [
                {"role": m.role, "content": m.content} for m in messages if m.role != "system"
            ],
        }
        if system:
            request["system"] = system

        started = time.monotonic()
        response = await self._client.messages.create(**request)
        return LLMResponse(
            content="".join(
                block.text for block in response.content if getattr(block, "type", "") == "text"
            ),
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            model=response.model,
            provider=self.provider_name,
            latency_ms=elapsed_ms(started),
        )

    @property
    def provider_name(self) -> str:
        return "anthropic"

    @property
    def model_name(self) -> str:
        return self._model
