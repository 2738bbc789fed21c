from __future__ import annotations

import json
import logging
from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from nota.models.enums import TaskStatus
from nota.models.media_source import MediaItem, MediaSource
from nota.models.task import Task, TaskItem
from nota.schemas.media_source_config import Condition, SearchFilter
from nota.services.datasource import get_datasource, get_export_path

logger = logging.getLogger(__name__)


def scan_media_source(db: Session, media_source: MediaSource) -> int:
    """
    Register every file of the datasource as a MediaItem (idempotent).
    Sidecar .json documents and the export directory are skipped.
    """
    ds = get_datasource(media_source)
    export_path = get_export_path(media_source)

    known = {
        (path, name)
        for path, name in db.query(MediaItem.path, MediaItem.name).filter(
            MediaItem.media_source_id == media_source.id
        )
    }

    added = 0
    for ref in ds.list_items():
        if ref.file_name.lower().endswith(".json"):
            continue
        if ref.resource == export_path or ref.resource.startswith(export_path + "/"):
            continue
        if (ref.resource, ref.file_name) in known:
            continue
        db.add(MediaItem(media_source_id=media_source.id, name=ref.file_name, path=ref.resource))
        known.add((ref.resource, ref.file_name))
        added += 1

    db.commit()
    logger.info("Scanned media source %s: %d new items", media_source.id, added)
    return added


def _lookup(metadata: dict[str, Any], field: str) -> Any:
    value: Any = metadata
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def _matches(condition: Condition, metadata: dict[str, Any]) -> bool:
    actual = _lookup(metadata, condition.field)
    if condition.operator == "eq":
        return actual == condition.value
    if condition.operator == "neq":
        return actual != condition.value
    if condition.operator == "contains":
        if isinstance(actual, (list, str)):
            return condition.value in actual
        return False
    if condition.operator == "in":
        return isinstance(condition.value, list) and actual in condition.value
    raise ValueError(f"Unknown condition operator: {condition.operator!r}")


def _has_extension(name: str, extensions: tuple[str, ...]) -> bool:
    return not extensions or name.lower().endswith(extensions)


def search_media_item_ids(
    db: Session,
    media_source: MediaSource,
    search_filter: SearchFilter,
    conditions: list[Condition] | None = None,
) -> list[int]:
    """
    Ids of media items matching the filter, ordered by id.

    - path: items in that directory or below it
    - extensions: case-insensitive file name suffixes ("jpg" or ".jpg")
    - exclude_already_used: skip items already used by a live task with the same template
    - conditions: evaluated against MediaItem metadata, all must match
    - limit: applied last
    """
    query = db.query(MediaItem.id, MediaItem.name, MediaItem.metadata_json).filter(
        MediaItem.media_source_id == media_source.id
    )

    path = (search_filter.path or "").strip("/")
    if path:
        query = query.filter(or_(MediaItem.path == path, MediaItem.path.startswith(path + "/", autoescape=True)))

    if search_filter.exclude_already_used and search_filter.task_template_id is not None:
        used = (
            select(TaskItem.media_item_id)
            .join(Task, Task.id == TaskItem.task_id)
            .where(
                Task.task_template_id == search_filter.task_template_id,
                Task.status != int(TaskStatus.DELETED),
            )
        )
        query = query.filter(MediaItem.id.not_in(used))

    extensions = tuple("." + e.lower().lstrip(".") for e in search_filter.extensions if e)

    ids: list[int] = []
    for item_id, name, metadata_json in query.order_by(MediaItem.id.asc()):
        if search_filter.limit is not None and len(ids) >= search_filter.limit:
            break
        if not _has_extension(name, extensions):
            continue
        if conditions:
            metadata = json.loads(metadata_json or "{}")
            if not all(_matches(c, metadata) for c in conditions):
                continue
        ids.append(item_id)

    return ids


def get_media_items(db: Session, ids: list[int]) -> list[MediaItem]:
    """Media items for ids, in the order of ids."""
    if not ids:
        return []
    rows = db.query(MediaItem).filter(MediaItem.id.in_(ids)).all()
    by_id = {m.id: m for m in rows}
    return [by_id[i] for i in ids if i in by_id]
