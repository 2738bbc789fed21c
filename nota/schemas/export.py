from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ExportOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime | None = Field(default=None, alias="from")
    to: datetime | None = None
    include_ongoing: bool = Field(default=True, alias="includeOngoing")
    name: str | None = None


class FileDescriptor(BaseModel):
    """A file persisted through a datasource."""

    name: str
    path: str
    size: int
    media_source_id: int | None = None


class ExportResult(BaseModel):
    file: FileDescriptor | None = None
    count: int = 0
