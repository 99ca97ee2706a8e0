# src/llm/base_client.py — v2
"""Abstract LLM client interface: free-text prompt in, free-text completion out."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod

from careerpath.llm.models import LLMResponse, Message


def elapsed_ms(started: float) -> int:
    """Milliseconds since a ``time.monotonic()`` reading."""
    return int((time.monotonic() - started) * 1000)


class BaseLLMClient(ABC):
    """Unified interface for all LLM providers.

    Implementations raise whatever their SDK raises; the content generator
    is responsible for mapping failures to GenerationFailed.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.2,
        expect_json: bool = False,
    ) -> LLMResponse:
        """Text completion.

        With ``expect_json`` the provider is asked for a bare JSON document
        where its API has such a mode; otherwise the flag is ignored.
        """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (google, openai, anthropic, ollama)."""

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Model identifier sent to the provider."""
