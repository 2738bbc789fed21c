from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from nota.core.config import settings
from nota.models.media_source import MediaItem
from nota.models.task import Task
from nota.schemas.media_source_config import SearchFilter
from nota.schemas.template import TemplateDefinition
from nota.services import media_sources, task_items
from nota.services.datasource import Datasource, ItemRef, get_datasource
from nota.services.errors import DiscoveryError, IngestionError, ParseError
from nota.services.labels import annotation_default_labels
from nota.services.parsers import ParsedAnnotation, Parser, get_parser
from nota.services.task_status import status_after_ingestion
from nota.services.tasks import get_media_source_config, get_template

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunOutcome:
    """Result of one ingestion run. A failed run always reports added=0."""

    added: int = 0
    error: IngestionError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @classmethod
    def ok(cls, added: int) -> RunOutcome:
        return cls(added=added)

    @classmethod
    def failed(cls, error: IngestionError) -> RunOutcome:
        return cls(added=0, error=error)


def sidecar_ref(media_item: MediaItem) -> ItemRef:
    """foo.jpg -> foo.jpg.json in the same directory."""
    return ItemRef(resource=media_item.path, file_name=f"{media_item.name}.json")


def _read_json(ds: Datasource, ref: ItemRef) -> Any:
    raw = b"".join(ds.read_item(ref))
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ParseError(f"{ref.relative_path}: invalid JSON ({e})") from e


def load_annotations(ds: Datasource, parser: Parser, media_item: MediaItem) -> list[ParsedAnnotation]:
    """Annotations imported from the media item's sidecar document, [] when there is none."""
    ref = sidecar_ref(media_item)
    try:
        if not ds.stat_item(ref):
            return []
        document = _read_json(ds, ref)
    except ParseError:
        raise
    except OSError as e:
        raise DiscoveryError(f"{ref.relative_path}: could not read ({e})") from e

    try:
        parsed = parser.parse(document)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"{ref.relative_path}: {e}") from e
    return list(parsed.annotations)


def _discover(db: Session, task: Task, template: TemplateDefinition) -> list[MediaItem]:
    try:
        config = get_media_source_config(task)
        search_filter = SearchFilter(
            path=config.options.path or "",
            task_template_id=task.task_template_id,
            extensions=template.media_extensions,
            limit=config.options.limit,
            exclude_already_used=config.options.exclude_already_used,
        )
        ids = media_sources.search_media_item_ids(db, task.media_source, search_filter, config.conditions)
        return media_sources.get_media_items(db, ids)
    except IngestionError:
        raise
    except Exception as e:
        raise DiscoveryError(f"Media source {task.media_source_id} search failed: {e}") from e


def _iter_with_annotations(
    ds: Datasource,
    parser: Parser,
    candidates: list[MediaItem],
    workers: int,
) -> Iterator[tuple[MediaItem, list[ParsedAnnotation]]]:
    """Yield (media item, annotations) in candidate order; loading may be spread over threads."""
    if workers <= 1 or len(candidates) <= 1:
        for media_item in candidates:
            yield media_item, load_annotations(ds, parser, media_item)
        return

    with ThreadPoolExecutor(max_workers=workers) as pool:
        loaded = pool.map(lambda m: load_annotations(ds, parser, m), candidates)
        yield from zip(candidates, loaded)


def _auto_create(db: Session, task: Task, template: TemplateDefinition) -> int:
    created = 0
    for definition in template.auto_create_definitions():
        missing = task_items.task_items_missing_annotation(db, task.id, definition.name)
        if not missing:
            continue
        labels = annotation_default_labels(definition.labels)
        created += task_items.create_annotations(db, missing, definition.name, labels, task.created_by)
        logger.info("Task %s: auto-created %d '%s' annotations", task.id, len(missing), definition.name)
    return created


def _ingest(db: Session, task: Task, refresh: bool, workers: int) -> int:
    if task.media_source is None or task.task_template is None:
        raise IngestionError(f"Task {task.id} has no media source or template")

    template = get_template(task)
    ds = get_datasource(task.media_source)
    parser = get_parser(template.parser)

    candidates = _discover(db, task, template)

    if refresh:
        # one snapshot, taken before any write
        attached = task_items.existing_media_item_ids(db, task.id)
        candidates = [m for m in candidates if m.id not in attached]

    added = 0
    for media_item, annotations in _iter_with_annotations(ds, parser, candidates, workers):
        task_items.create_task_item(db, task, media_item, annotations)
        added += 1

    _auto_create(db, task, template)
    return added


def _finish(db: Session, task: Task, prior: int, refresh: bool, succeeded: bool) -> None:
    new_status = status_after_ingestion(prior, refresh, succeeded)
    if int(new_status) != task.status:
        task.status = int(new_status)
        db.commit()


def run_ingestion(db: Session, task: Task, refresh: bool = False, workers: int | None = None) -> RunOutcome:
    """
    Attach media items to a task and import their annotations.

    First run (refresh=False): every discovered item becomes a task item, then
    the task goes READY, or CREATING_ERROR on failure.
    Refresh: only items not yet attached are added; the status never changes,
    failures are reported through the returned outcome only.
    """
    prior = task.status
    try:
        added = _ingest(db, task, refresh, workers if workers is not None else settings.ingest_workers)
    except Exception as e:
        db.rollback()
        error = e if isinstance(e, IngestionError) else IngestionError(str(e))
        if error is not e:
            error.__cause__ = e
        logger.exception("Ingestion of task %s failed (refresh=%s)", task.id, refresh)
        _finish(db, task, prior, refresh, succeeded=False)
        return RunOutcome.failed(error)

    _finish(db, task, prior, refresh, succeeded=True)
    logger.info("Ingestion of task %s done (refresh=%s): %d items added", task.id, refresh, added)
    return RunOutcome.ok(added)
