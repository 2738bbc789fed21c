from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from nota.core.config import settings
from nota.models.task import Task, TaskItem
from nota.schemas.export import ExportOptions, ExportResult
from nota.services import task_items
from nota.services.datasource import get_datasource, get_export_path
from nota.services.errors import SerializationError
from nota.services.export_utils import prepare_archive, write_archives
from nota.services.parsers import ExportAnnotation, ExportItem, Parser, get_parser
from nota.services.tasks import get_template

logger = logging.getLogger(__name__)


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc)


def _file_safe(value: str) -> str:
    return value.replace("/", "_").replace("\\", "_")


def archive_name(task_name: str, name: str | None = None, now: datetime | None = None) -> str:
    """<name>.tar.gz, or <task name>_<YYYYMMDD>_<epoch ms>.tar.gz (UTC). Path separators become "_"."""
    if name:
        return f"{_file_safe(name)}.tar.gz"
    now = now or datetime.now(timezone.utc)
    return f"{_file_safe(task_name)}_{now.strftime('%Y%m%d')}_{int(now.timestamp() * 1000)}.tar.gz"


def build_nota_url(task: Task, task_item: TaskItem) -> str:
    return "/".join(
        [
            settings.nota_host or "",
            "annotation",
            str(task.project_id),
            str(task.id),
            str(task_item.task_assignment_id) if task_item.task_assignment_id else "??",
            str(task_item.id),
        ]
    )


def to_export_item(task: Task, task_item: TaskItem) -> ExportItem:
    media = task_item.media_item
    return ExportItem(
        id=task_item.id,
        status=task_item.status,
        media_name=media.name,
        media_path=media.path,
        media_metadata=json.loads(media.metadata_json or "{}"),
        nota_url=build_nota_url(task, task_item),
        task_assignment_id=task_item.task_assignment_id,
        annotations=[
            ExportAnnotation(
                id=a.id,
                labels_name=a.labels_name,
                labels=json.loads(a.labels_json or "{}"),
                boundaries=json.loads(a.boundaries_json) if a.boundaries_json else None,
                status=a.status,
            )
            for a in task_item.annotations
        ],
    )


def serialize_items(task: Task, selected: list[TaskItem], parser: Parser) -> list[tuple[str, bytes]]:
    """Serialize each item; items the parser returns None for are left out."""
    files: list[tuple[str, bytes]] = []
    for task_item in selected:
        try:
            out = parser.serialize(to_export_item(task, task_item))
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError(f"Task item {task_item.id}: {e}") from e
        if out:
            files.append(out)
    return files


def select_items_for_export(db: Session, task: Task, options: ExportOptions) -> list[TaskItem]:
    return task_items.done_task_items(
        db,
        task.id,
        from_=_as_utc(options.from_),
        to=_as_utc(options.to),
        include_ongoing=options.include_ongoing,
    )


def export_task(db: Session, task: Task, options: ExportOptions | None = None) -> ExportResult:
    """
    Export DONE task items of a task into one .tar.gz stored on the task's media source.
    An empty selection (or one the parser vetoes entirely) returns file=None, count=0.
    Errors propagate to the caller.
    """
    options = options or ExportOptions()

    selected = select_items_for_export(db, task, options)
    if not selected:
        logger.info("Export of task %s: nothing selected", task.id)
        return ExportResult(file=None, count=0)

    parser = get_parser(get_template(task).parser)
    files = serialize_items(task, selected, parser)
    if not files:
        logger.info("Export of task %s: %d items selected, none serialized", task.id, len(selected))
        return ExportResult(file=None, count=0)

    name = archive_name(task.name, options.name)
    archive = prepare_archive(files)

    ds = get_datasource(task.media_source)
    written = write_archives([(name, archive)], ds, get_export_path(task.media_source))

    logger.info("Exported %d items of task %s to %s", len(files), task.id, written[0].path)
    return ExportResult(file=written[0], count=len(files))
