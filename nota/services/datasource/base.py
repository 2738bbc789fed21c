from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass

from nota.schemas.export import FileDescriptor


@dataclass(frozen=True)
class ItemRef:
    """Location of a file inside a datasource: resource (directory) + file name."""

    resource: str
    file_name: str

    @property
    def relative_path(self) -> str:
        resource = self.resource.strip("/")
        return f"{resource}/{self.file_name}" if resource else self.file_name


class Datasource(ABC):
    """Storage behind a MediaSource row."""

    def __init__(self, media_source_id: int | None = None):
        self.media_source_id = media_source_id

    @abstractmethod
    def list_items(self) -> Iterator[ItemRef]:
        ...

    @abstractmethod
    def stat_item(self, ref: ItemRef) -> bool:
        ...

    @abstractmethod
    def read_item(self, ref: ItemRef) -> Iterator[bytes]:
        """Finite, single-pass stream of the item's bytes."""

    @abstractmethod
    def write_item(self, ref: ItemRef, data: bytes) -> FileDescriptor:
        ...
