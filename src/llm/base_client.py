# src/llm/base_client.py - v2
"""Abstract LLM client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from presetindex.llm.models import LLMResponse, Message


class BaseLLMClient(ABC):
    """Chat completion transport used by the annotation generator."""

    @abstractmethod
    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        temperature: float = 1.2,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Text completion. ``json_mode`` asks the provider for a JSON object."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier."""
