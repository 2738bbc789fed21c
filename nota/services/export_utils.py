"""Packing serialized task items into .tar.gz archives and storing them."""

from __future__ import annotations

import io
import tarfile
import time

from nota.schemas.export import FileDescriptor
from nota.services.datasource import Datasource, ItemRef


def prepare_archive(files: list[tuple[str, bytes]]) -> bytes:
    """gzip'd tar of (file_name, file_bytes) pairs, members in the given order."""
    buf = io.BytesIO()
    mtime = int(time.time())
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data in files:
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mtime = mtime
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def write_archives(archives: list[tuple[str, bytes]], ds: Datasource, export_path: str = "exports") -> list[FileDescriptor]:
    return [ds.write_item(ItemRef(resource=export_path, file_name=name), data) for name, data in archives]
