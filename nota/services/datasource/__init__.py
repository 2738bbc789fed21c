from __future__ import annotations

import json

from nota.models.media_source import MediaSource
from nota.services.datasource.base import Datasource, ItemRef
from nota.services.datasource.filesystem import FilesystemDatasource
from nota.services.errors import UnknownDatasource


def _filesystem(media_source: MediaSource, config: dict) -> Datasource:
    root = config.get("root")
    if not root:
        raise UnknownDatasource(f"MediaSource {media_source.id} has no 'root' configured")
    return FilesystemDatasource(root, media_source_id=media_source.id)


# Map MediaSource.type -> datasource factory
DATASOURCE_TYPES = {
    "filesystem": _filesystem,
}


def get_datasource(media_source: MediaSource) -> Datasource:
    factory = DATASOURCE_TYPES.get(media_source.type)
    if not factory:
        raise UnknownDatasource(f"Unknown media source type: {media_source.type}")
    config = json.loads(media_source.config_json or "{}")
    return factory(media_source, config)


def get_export_path(media_source: MediaSource) -> str:
    config = json.loads(media_source.config_json or "{}")
    return str(config.get("exportPath") or "exports").strip("/")


__all__ = ["Datasource", "ItemRef", "FilesystemDatasource", "DATASOURCE_TYPES", "get_datasource", "get_export_path"]
