# src/core/models.py - v2
"""Domain models shared across the catalog build.

Presets come in two shapes, told apart once at load time and carried as a
tagged union afterwards:

  MainPreset       keywords + prompts (a full conversation preset)
  CharacterPreset  name + nick_name + input + system (a group-chat character)

Beyond those discriminating keys the preset body is not validated; every
other key is kept as-is.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

PresetKind = Literal["main", "character"]


# === Presets ===


class MainPreset(BaseModel):
    """Conversation preset (``presets/chatluna``)."""

    model_config = ConfigDict(extra="allow")

    kind: Literal["main"] = "main"
    keywords: list[str]
    prompts: list[Any]
    format_user_prompt: str | None = None
    version: str | None = None

    @field_validator("keywords", mode="before")
    @classmethod
    def coerce_keywords(cls, v: Any) -> list[str]:
        if isinstance(v, (str, int, float)):
            v = [v]
        return [str(k) for k in v or []]

    @field_validator("version", mode="before")
    @classmethod
    def coerce_version(cls, v: Any) -> str | None:
        return None if v is None else str(v)


class CharacterPreset(BaseModel):
    """Group-chat character preset (``presets/chatluna-character``)."""

    model_config = ConfigDict(extra="allow")

    kind: Literal["character"] = "character"
    name: str
    nick_name: list[str]
    input: Any
    system: Any
    status: Any = None
    mute_keyword: list[str] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def coerce_name(cls, v: Any) -> str:
        return str(v)

    @field_validator("nick_name", "mute_keyword", mode="before")
    @classmethod
    def coerce_str_list(cls, v: Any) -> list[str]:
        if v is None:
            return []
        if isinstance(v, (str, int, float)):
            v = [v]
        return [str(n) for n in v]


Preset = Annotated[Union[MainPreset, CharacterPreset], Field(discriminator="kind")]


class PresetDocument(BaseModel):
    """One preset file, read and discriminated, ready for reconciliation."""

    raw_path: str  # canonical identifier and download URL
    relative_path: str
    name: str
    kind: PresetKind  # category of the source directory
    raw_text: str
    preset: Preset

    @property
    def keywords(self) -> list[str]:
        """Catalog keywords: preset keywords, or the character's own name."""
        if isinstance(self.preset, MainPreset):
            return list(self.preset.keywords)
        return [self.preset.name]


# === Annotation ===


class Annotation(BaseModel):
    """Generated enrichment of a preset: rating, description and tags.

    A rating of 0 is valid; only missing or out-of-range ratings are rejected.
    """

    model_config = ConfigDict(frozen=True)

    rating: float = Field(ge=0, le=5)
    description: str = Field(min_length=1)
    tags: list[str] = Field(min_length=1, max_length=10)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("tags", mode="before")
    @classmethod
    def clean_tags(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.replace("，", ",").split(",")
        if isinstance(v, list):
            return [str(t).strip() for t in v if str(t).strip()]
        return v


# === Catalog output ===


class PresetRecord(BaseModel):
    """One entry of ``presets.json``."""

    model_config = ConfigDict(populate_by_name=True)

    keywords: list[str]
    type: PresetKind
    name: str
    raw_path: str = Field(alias="rawPath")
    relative_path: str = Field(alias="relativePath")
    description: str | None = None
    rating: float | None = None
    tags: list[str] | None = None

    @classmethod
    def from_document(cls, document: PresetDocument) -> PresetRecord:
        return cls(
            keywords=document.keywords,
            type=document.kind,
            name=document.name,
            raw_path=document.raw_path,
            relative_path=document.relative_path,
        )

    @property
    def annotated(self) -> bool:
        return self.description is not None

    def with_annotation(self, annotation: Annotation) -> PresetRecord:
        """Return a copy carrying the given annotation."""
        return self.model_copy(
            update={
                "description": annotation.description,
                "rating": annotation.rating,
                "tags": list(annotation.tags),
            }
        )

    def to_json_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
