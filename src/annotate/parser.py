# src/annotate/parser.py - v1
"""Recover an Annotation from a model reply that may not be clean JSON.

Strategies, tried in order, each yielding a candidate object or None:
  1. the whole reply parsed as JSON
  2. the body of a fenced ```json block
  3. the span from the first '{' to the last '}'

Validation runs once, on the first candidate that is a JSON object.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from presetindex.annotate.models import GenerationError
from presetindex.core.models import Annotation

_FENCED_JSON = re.compile(r"```json\s*(.*?)```", re.IGNORECASE | re.DOTALL)


def _loads(text: str) -> Any | None:
    try:
        return json.loads(text)
    except ValueError:
        return None


def _whole_reply(text: str) -> Any | None:
    return _loads(text.strip())


def _fenced_block(text: str) -> Any | None:
    match = _FENCED_JSON.search(text)
    if match is None:
        return None
    return _loads(match.group(1).strip())


def _outer_braces(text: str) -> Any | None:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return _loads(text[start : end + 1])


STRATEGIES: tuple[Callable[[str], Any | None], ...] = (
    _whole_reply,
    _fenced_block,
    _outer_braces,
)


def extract_json_object(text: str) -> dict[str, Any] | None:
    """Return the first JSON object any strategy recovers from ``text``."""
    for strategy in STRATEGIES:
        candidate = strategy(text)
        if isinstance(candidate, dict):
            return candidate
    return None


def parse_annotation(text: str) -> Annotation:
    """Parse a model reply into a validated Annotation.

    Raises:
        GenerationError: If no JSON object can be recovered, or the object
            lacks a usable rating, description or tag list.
    """
    payload = extract_json_object(text)
    if payload is None:
        raise GenerationError(f"No JSON object in reply: {text[:200]!r}")
    try:
        return Annotation.model_validate(payload)
    except ValidationError as e:
        raise GenerationError(f"Invalid annotation payload: {e}") from e
