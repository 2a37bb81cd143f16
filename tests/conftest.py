# tests/conftest.py - v2
"""Shared test fixtures for unit tests.

Provides preset samples, a temporary preset tree, mock LLM clients and a
fake clock. No network access: the chat transport is always mocked.
"""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from presetindex.core.models import CharacterPreset, MainPreset, PresetDocument
from presetindex.llm.models import LLMResponse

BASE = "https://raw.githubusercontent.com/ChatLunaLab/awesome-chatluna-presets/main"

ANNOTATION_PAYLOAD = {
    "rating": 4.3,
    "description": "猫娘女仆，性格温顺黏人，说话句尾带喵。",
    "tags": ["猫娘", "女仆", "日常陪伴"],
}

MAIN_PRESET_YAML = """\
keywords:
  - 猫娘
  - catgirl
prompts:
  - role: system
    content: 你是一只可爱的猫娘，说话句尾带喵。
  - role: assistant
    content: 主人好喵~
format_user_prompt: "{sender}: {prompt}"
"""

CHARACTER_PRESET_YAML = """\
name: 小明
nick_name:
  - 明明
  - 阿明
input: |
  {history_new}
system: |
  你是群聊中的小明，喜欢开玩笑。
mute_keyword:
  - 闭嘴
"""


# === FIXTURES: Sample data ===


def _make_document(
    name: str,
    text: str | None = None,
    kind: str = "main",
) -> PresetDocument:
    """Build a PresetDocument without touching the filesystem."""
    directory = "presets/chatluna" if kind == "main" else "presets/chatluna-character"
    if kind == "main":
        preset = MainPreset(keywords=[name], prompts=[])
    else:
        preset = CharacterPreset(name=name, nick_name=[name], input="", system="")
    return PresetDocument(
        raw_path=f"{BASE}/{directory}/{name}.yml",
        relative_path=f"main/{directory}/{name}.yml",
        name=name,
        kind=kind,
        raw_text=text if text is not None else f"preset text of {name}",
        preset=preset,
    )


@pytest.fixture
def annotation_json() -> str:
    return json.dumps(ANNOTATION_PAYLOAD, ensure_ascii=False)


@pytest.fixture
def preset_root(tmp_path: Path) -> Path:
    """Preset tree with two main presets and one character preset."""
    main_dir = tmp_path / "presets" / "chatluna"
    char_dir = tmp_path / "presets" / "chatluna-character"
    main_dir.mkdir(parents=True)
    char_dir.mkdir(parents=True)
    (main_dir / "catgirl.yml").write_text(MAIN_PRESET_YAML, encoding="utf-8")
    (main_dir / "assistant.yml").write_text(
        "keywords: [助手]\nprompts:\n  - role: system\n    content: 你是一个助手\n",
        encoding="utf-8",
    )
    (char_dir / "xiaoming.yml").write_text(CHARACTER_PRESET_YAML, encoding="utf-8")
    return tmp_path


# === FIXTURES: Mock LLM ===


def _llm_response(content: str) -> LLMResponse:
    return LLMResponse(
        content=content,
        input_tokens=100,
        output_tokens=50,
        model="gpt-4o-mini",
        provider="openai",
        latency_ms=300,
    )


@pytest.fixture
def mock_llm_response(annotation_json: str) -> LLMResponse:
    """Well-formed annotation reply."""
    return _llm_response(annotation_json)


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient that always answers with a valid annotation."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "mock"
    return client


@pytest.fixture
def failing_llm_client() -> AsyncMock:
    """Mock BaseLLMClient whose transport always fails."""
    client = AsyncMock()
    client.complete = AsyncMock(side_effect=ConnectionError("connection reset"))
    client.provider_name = "mock"
    return client


# === FIXTURES: Time ===


class FakeClock:
    """Manual clock; sleep() advances it instantly and records the wait."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_document():
    """Factory fixture: make_document(name, text=None, kind="main")."""
    return _make_document


@pytest.fixture
def make_response():
    """Factory fixture: make_response(content) -> LLMResponse."""
    return _llm_response
