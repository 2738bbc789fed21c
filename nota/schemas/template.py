from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AnnotationOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    auto_create: bool = Field(default=False, alias="autoCreate")


class AnnotationDefinition(BaseModel):
    name: str
    labels: list[dict[str, Any]] = Field(default_factory=list)
    options: AnnotationOptions = Field(default_factory=AnnotationOptions)


class TemplateDefinition(BaseModel):
    """Decoded form of TaskTemplate.template_json."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    parser: str = "nota"
    media_extensions: list[str] = Field(default_factory=list, alias="mediaExtensions")
    annotations: list[AnnotationDefinition] = Field(default_factory=list)

    @classmethod
    def from_json(cls, raw: str | None) -> TemplateDefinition:
        if not raw:
            return cls()
        return cls.model_validate_json(raw)

    def auto_create_definitions(self) -> list[AnnotationDefinition]:
        return [d for d in self.annotations if d.options.auto_create]
