from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Condition(BaseModel):
    """
    A media-item filter forwarded untouched to the media source.
    The pipeline never looks inside; only search_media_item_ids evaluates it.
    """

    model_config = ConfigDict(extra="allow")

    field: str
    operator: str = "eq"
    value: Any = None


class MediaSourceOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    path: str = ""
    limit: int | None = Field(default=None, ge=0)
    exclude_already_used: bool = Field(default=False, alias="excludeAlreadyUsed")


class MediaSourceConfig(BaseModel):
    """Decoded form of Task.media_source_config_json."""

    model_config = ConfigDict(populate_by_name=True)

    options: MediaSourceOptions = Field(default_factory=MediaSourceOptions)
    conditions: list[Condition] = Field(default_factory=list)

    @classmethod
    def from_json(cls, raw: str | None) -> MediaSourceConfig:
        if not raw:
            return cls()
        return cls.model_validate_json(raw)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class SearchFilter(BaseModel):
    path: str = ""
    task_template_id: int | None = None
    extensions: list[str] = Field(default_factory=list)
    limit: int | None = None
    exclude_already_used: bool = False
