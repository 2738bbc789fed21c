from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ParsedAnnotation(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    labels_name: str = Field(alias="labelsName", min_length=1)
    labels: dict[str, Any] = Field(default_factory=dict)
    boundaries: Any = None
    status: int = 0


class ParsedAnnotations(BaseModel):
    annotations: list[ParsedAnnotation] = Field(default_factory=list)


@dataclass
class ExportAnnotation:
    id: int
    labels_name: str
    labels: dict[str, Any]
    boundaries: Any
    status: int


@dataclass
class ExportItem:
    """A DONE task item with its media item and annotations, as handed to a parser."""

    id: int
    status: int
    media_name: str
    media_path: str
    media_metadata: dict[str, Any]
    nota_url: str
    task_assignment_id: int | None = None
    annotations: list[ExportAnnotation] = field(default_factory=list)


class Parser(ABC):
    """Translates between an external annotation document format and our annotations."""

    kind: str = ""

    @abstractmethod
    def parse(self, document: Any) -> ParsedAnnotations:
        """Raise nota.services.errors.ParseError when the document is not acceptable."""

    @abstractmethod
    def serialize(self, item: ExportItem) -> tuple[str, bytes] | None:
        """Return (file_name, file_bytes), or None when the item has nothing to export."""
