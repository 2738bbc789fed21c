from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

from nota.schemas.export import FileDescriptor
from nota.services.datasource.base import Datasource, ItemRef

_CHUNK_SIZE = 64 * 1024


class FilesystemDatasource(Datasource):
    def __init__(self, root: str | os.PathLike, media_source_id: int | None = None):
        super().__init__(media_source_id)
        self.root = Path(root).resolve()

    def _resolve(self, ref: ItemRef) -> Path:
        p = (self.root / ref.relative_path).resolve()
        # refuse anything escaping the root (e.g. "../")
        if p != self.root and self.root not in p.parents:
            raise ValueError(f"Path escapes datasource root: {ref.relative_path}")
        return p

    def list_items(self) -> Iterator[ItemRef]:
        if not self.root.exists():
            return
        for dirpath, dirnames, filenames in os.walk(self.root):
            dirnames.sort()
            resource = Path(dirpath).relative_to(self.root).as_posix()
            if resource == ".":
                resource = ""
            for fn in sorted(filenames):
                yield ItemRef(resource=resource, file_name=fn)

    def stat_item(self, ref: ItemRef) -> bool:
        return self._resolve(ref).is_file()

    def read_item(self, ref: ItemRef) -> Iterator[bytes]:
        with open(self._resolve(ref), "rb") as f:
            while True:
                chunk = f.read(_CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    def write_item(self, ref: ItemRef, data: bytes) -> FileDescriptor:
        p = self._resolve(ref)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        return FileDescriptor(
            name=ref.file_name,
            path=ref.relative_path,
            size=len(data),
            media_source_id=self.media_source_id,
        )
