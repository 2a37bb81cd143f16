# src/annotate/generator.py - v1
"""Annotation generator: one chat completion per preset, parsed into an Annotation."""

from __future__ import annotations

import logging

from presetindex.annotate.models import GenerationError, GenerationResult
from presetindex.annotate.parser import parse_annotation
from presetindex.annotate.prompts import SYSTEM_PROMPT, render_user_prompt
from presetindex.config.settings import Settings
from presetindex.llm.base_client import BaseLLMClient
from presetindex.llm.models import Message

logger = logging.getLogger(__name__)


class AnnotationGenerator:
    """Ask the chat model to rate, describe and tag a preset.

    Built without a client (no API_KEY / BASE_URL), every call returns a
    ``skipped`` result and a single warning is logged for the run.
    """

    def __init__(
        self,
        client: BaseLLMClient | None,
        temperature: float = 1.2,
    ) -> None:
        self._client = client
        self._temperature = temperature
        self._warned = False

    @classmethod
    def from_settings(cls, settings: Settings) -> AnnotationGenerator:
        if not settings.generation_enabled:
            return cls(client=None, temperature=settings.temperature)

        from presetindex.llm.adapters.openai_adapter import OpenAIAdapter

        client = OpenAIAdapter(
            model=settings.model,
            api_key=settings.api_key,
            base_url=settings.base_url,
        )
        return cls(client=client, temperature=settings.temperature)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def generate(self, preset_text: str) -> GenerationResult:
        """Generate an annotation for one preset's raw text.

        Raises:
            GenerationError: On transport failure, an empty reply, or a reply
                that cannot be parsed into a valid annotation.
        """
        if self._client is None:
            if not self._warned:
                logger.warning(
                    "No API key or base URL provided, skipping AI description generation"
                )
                self._warned = True
            return GenerationResult.skipped()

        try:
            response = await self._client.complete(
                [Message(role="user", content=render_user_prompt(preset_text))],
                system=SYSTEM_PROMPT,
                temperature=self._temperature,
                json_mode=True,
            )
        except Exception as e:
            raise GenerationError(f"Chat completion request failed: {e}") from e

        if not response.content.strip():
            raise GenerationError(
                f"Chat completion returned no message content (model={response.model})"
            )

        annotation = parse_annotation(response.content)
        logger.debug(
            "Generated annotation in %dms (%d in / %d out tokens)",
            response.latency_ms, response.input_tokens, response.output_tokens,
        )
        return GenerationResult.generated(annotation)
