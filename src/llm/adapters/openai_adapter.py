# src/llm/adapters/openai_adapter.py - v2
"""OpenAI-compatible chat completions adapter implementing BaseLLMClient.

Uses the official openai SDK pointed at BASE_URL, so any compatible
gateway works (``POST <base_url>/chat/completions`` with a bearer key).
SDK-level retries are disabled; retrying is the caller's job.
"""

from __future__ import annotations

import time
from typing import Any

from presetindex.llm.base_client import BaseLLMClient
from presetindex.llm.models import LLMResponse, Message


class OpenAIAdapter(BaseLLMClient):
    """Chat completions over the openai SDK."""

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str = "",
        base_url: str | None = None,
        **kwargs: Any,
    ):
        self._model = model
        self._api_key = api_key
        self._base_url = base_url or None

    @property
    def model(self) -> str:
        return self._model

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        temperature: float = 1.2,
        json_mode: bool = False,
    ) -> LLMResponse:
        import openai

        client = openai.AsyncOpenAI(
            api_key=self._api_key, base_url=self._base_url, max_retries=0
        )
        oai_messages: list[dict[str, Any]] = []
        if system:
            oai_messages.append({"role": "system", "content": system})
        for m in messages:
            oai_messages.append({"role": m.role, "content": m.content})

        kwargs: dict[str, Any] = {
            "model": self._model,
            "messages": oai_messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        t0 = time.monotonic()
        resp = await client.chat.completions.create(**kwargs)
        latency = int((time.monotonic() - t0) * 1000)

        content = ""
        if resp.choices and resp.choices[0].message is not None:
            content = resp.choices[0].message.content or ""
        usage = resp.usage
        return LLMResponse(
            content=content,
            input_tokens=usage.prompt_tokens if usage else 0,
            output_tokens=usage.completion_tokens if usage else 0,
            model=self._model,
            provider="openai",
            latency_ms=latency,
            raw_response=resp,
        )

    @property
    def provider_name(self) -> str:
        return "openai"
