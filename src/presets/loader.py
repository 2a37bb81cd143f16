# src/presets/loader.py - v1
"""Preset discovery: list a category directory, parse each YAML file, discriminate its shape.

A file that is not valid YAML, or whose content matches neither preset
shape, raises PresetParseError. That is fatal for the run: the generator
cannot do anything useful with a malformed preset either.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from presetindex.config.settings import Settings
from presetindex.core.models import (
    CharacterPreset,
    MainPreset,
    PresetDocument,
    PresetKind,
)

logger = logging.getLogger(__name__)

PRESET_SUFFIXES = (".yml", ".yaml")

_MAIN_KEYS = ("keywords", "prompts")
_CHARACTER_KEYS = ("name", "nick_name", "input", "system")


class PresetParseError(Exception):
    """A preset file could not be parsed into either preset shape."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


@dataclass(frozen=True)
class PresetSource:
    """A category directory, relative to the preset root (e.g. ``presets/chatluna``)."""

    directory: str
    kind: PresetKind


def default_sources(settings: Settings) -> list[PresetSource]:
    return [
        PresetSource(settings.main_preset_dir, "main"),
        PresetSource(settings.character_preset_dir, "character"),
    ]


def discriminate(data: Any, path: Path) -> MainPreset | CharacterPreset:
    """Resolve parsed YAML into the matching preset model, once."""
    if not isinstance(data, dict):
        raise PresetParseError(path, f"expected a mapping, got {type(data).__name__}")

    try:
        if all(k in data for k in _MAIN_KEYS):
            return MainPreset.model_validate({**data, "kind": "main"})
        if all(k in data for k in _CHARACTER_KEYS):
            return CharacterPreset.model_validate({**data, "kind": "character"})
    except ValidationError as e:
        raise PresetParseError(path, str(e)) from e

    raise PresetParseError(
        path,
        "unknown preset shape (need keywords+prompts or name+nick_name+input+system)",
    )


def load_preset(
    path: Path, source: PresetSource, remote_base_url: str
) -> PresetDocument:
    """Read and discriminate a single preset file."""
    # Exact file content, CRLF line endings included.
    raw_text = path.read_bytes().decode("utf-8")
    try:
        data = yaml.safe_load(raw_text)
    except yaml.YAMLError as e:
        raise PresetParseError(path, f"invalid YAML: {e}") from e

    preset = discriminate(data, path)
    if preset.kind != source.kind:
        logger.warning(
            "%s has %s shape but lives in the %s directory %s",
            path.name, preset.kind, source.kind, source.directory,
        )

    return PresetDocument(
        raw_path=f"{remote_base_url}/{source.directory}/{path.name}",
        relative_path=f"main/{source.directory}/{path.name}",
        name=path.stem,
        kind=source.kind,
        raw_text=raw_text,
        preset=preset,
    )


def scan_presets(
    root: Path, source: PresetSource, remote_base_url: str
) -> list[PresetDocument]:
    """Load every preset file of a category directory, in file name order.

    Raises:
        FileNotFoundError: If the category directory does not exist.
        PresetParseError: On the first malformed preset.
    """
    directory = Path(root) / source.directory
    if not directory.is_dir():
        raise FileNotFoundError(f"Preset directory not found: {directory}")

    documents = [
        load_preset(path, source, remote_base_url)
        for path in sorted(directory.iterdir())
        if path.is_file() and path.suffix.lower() in PRESET_SUFFIXES
    ]
    logger.info("Found %d %s presets in %s", len(documents), source.kind, directory)
    return documents
