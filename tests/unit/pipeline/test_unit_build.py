# tests/unit/pipeline/test_unit_build.py - v2
"""Tests for pipeline/build.py - full catalog build over a temporary preset tree."""

from __future__ import annotations

import json

import pytest

from presetindex.annotate.generator import AnnotationGenerator
from presetindex.config.settings import Settings
from presetindex.llm.rate_limiter import NullRateLimiter
from presetindex.logging.context import get_context
from presetindex.pipeline.build import build_catalog
from presetindex.presets.loader import PresetParseError


def _settings(root, **overrides) -> Settings:
    values = dict(
        preset_root=root,
        api_key="sk-test",
        base_url="https://gw/v1",
        automated=False,
        cache_fallback_urls="",
        cache_prune_stale=False,
    )
    values.update(overrides)
    return Settings(**values)


async def _build(settings, client):
    return await build_catalog(
        settings,
        generator=AnnotationGenerator(client=client),
        rate_limiter=NullRateLimiter(),
    )


class TestBuildCatalog:
    @pytest.mark.asyncio
    async def test_first_run_generates_everything(self, preset_root, mock_llm_client):
        result = await _build(_settings(preset_root), mock_llm_client)

        assert mock_llm_client.complete.await_count == 3
        assert result.stats.generated == 3
        assert result.cache_source is None

        catalog = json.loads((preset_root / "presets.json").read_text(encoding="utf-8"))
        assert [e["name"] for e in catalog] == ["assistant", "catgirl", "xiaoming"]
        assert [e["type"] for e in catalog] == ["main", "main", "character"]
        assert catalog[1]["keywords"] == ["猫娘", "catgirl"]
        assert catalog[2]["keywords"] == ["小明"]
        assert catalog[1]["rawPath"].endswith("/presets/chatluna/catgirl.yml")
        assert all(e["rating"] == 4.3 for e in catalog)

        cache = json.loads((preset_root / "cache-presets.json").read_text(encoding="utf-8"))
        assert len(cache) == 3

    @pytest.mark.asyncio
    async def test_second_automated_run_is_idempotent(self, preset_root, mock_llm_client):
        await _build(_settings(preset_root), mock_llm_client)
        catalog_1 = (preset_root / "presets.json").read_text(encoding="utf-8")
        cache_1 = (preset_root / "cache-presets.json").read_text(encoding="utf-8")
        mock_llm_client.complete.reset_mock()

        result = await _build(_settings(preset_root, automated=True), mock_llm_client)

        assert mock_llm_client.complete.await_count == 0
        assert result.stats.reused == 3
        assert result.cache_source.startswith("file:")
        assert (preset_root / "presets.json").read_text(encoding="utf-8") == catalog_1
        assert (preset_root / "cache-presets.json").read_text(encoding="utf-8") == cache_1

    @pytest.mark.asyncio
    async def test_local_edit_regenerates_one_preset(self, preset_root, mock_llm_client):
        await _build(_settings(preset_root), mock_llm_client)
        mock_llm_client.complete.reset_mock()

        path = preset_root / "presets" / "chatluna" / "catgirl.yml"
        path.write_text(path.read_text(encoding="utf-8") + "version: '2'\n", encoding="utf-8")

        result = await _build(_settings(preset_root), mock_llm_client)

        assert mock_llm_client.complete.await_count == 1
        assert result.stats.reused == 2
        assert result.stats.generated == 1

    @pytest.mark.asyncio
    async def test_without_credentials_writes_bare_catalog(self, preset_root):
        settings = _settings(preset_root, api_key="", base_url="")
        result = await build_catalog(settings, rate_limiter=NullRateLimiter())

        catalog = json.loads((preset_root / "presets.json").read_text(encoding="utf-8"))
        assert len(catalog) == 3
        assert all("description" not in e for e in catalog)
        assert result.stats.skipped == 3

    @pytest.mark.asyncio
    async def test_malformed_preset_aborts_run(self, preset_root, mock_llm_client):
        (preset_root / "presets" / "chatluna" / "zzz.yml").write_text(
            "- not\n- a\n- preset\n", encoding="utf-8"
        )
        with pytest.raises(PresetParseError):
            await _build(_settings(preset_root), mock_llm_client)
        assert not (preset_root / "presets.json").exists()

    @pytest.mark.asyncio
    async def test_run_context_cleared_after_build(self, preset_root, mock_llm_client):
        await _build(_settings(preset_root), mock_llm_client)
        assert get_context().as_dict() == {}

    @pytest.mark.asyncio
    async def test_run_context_cleared_after_failure(self, tmp_path, mock_llm_client):
        with pytest.raises(FileNotFoundError):
            await _build(_settings(tmp_path), mock_llm_client)
        assert get_context().run_id is None
