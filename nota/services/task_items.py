from __future__ import annotations

import json
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from nota.models.annotation import Annotation
from nota.models.enums import TaskAssignmentStatus, TaskItemStatus
from nota.models.media_source import MediaItem
from nota.models.task import Task, TaskAssignment, TaskItem
from nota.services.errors import PersistenceError
from nota.services.parsers.base import ParsedAnnotation


def existing_media_item_ids(db: Session, task_id: int) -> set[int]:
    rows = db.query(TaskItem.media_item_id).filter(TaskItem.task_id == task_id)
    return {media_item_id for (media_item_id,) in rows}


def count_task_items(db: Session, task_id: int) -> int:
    return db.query(TaskItem).filter(TaskItem.task_id == task_id).count()


def create_task_item(
    db: Session,
    task: Task,
    media_item: MediaItem,
    annotations: list[ParsedAnnotation],
) -> TaskItem:
    """Create one NOT_DONE task item with its imported annotations (single commit)."""
    try:
        item = TaskItem(
            task_id=task.id,
            media_item_id=media_item.id,
            status=int(TaskItemStatus.NOT_DONE),
            created_by=task.created_by,
            annotations=[
                Annotation(
                    labels_name=a.labels_name,
                    labels_json=json.dumps(a.labels, ensure_ascii=False),
                    boundaries_json=json.dumps(a.boundaries, ensure_ascii=False) if a.boundaries is not None else None,
                    status=a.status,
                    created_by=task.created_by,
                )
                for a in annotations
            ],
        )
        db.add(item)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Could not create task item for media item {media_item.id}: {e}") from e
    return item


def task_items_missing_annotation(db: Session, task_id: int, labels_name: str) -> list[TaskItem]:
    """NOT_DONE task items of a task that have no annotation named labels_name."""
    has_it = select(Annotation.task_item_id).where(Annotation.labels_name == labels_name)
    return (
        db.query(TaskItem)
        .filter(
            TaskItem.task_id == task_id,
            TaskItem.status == int(TaskItemStatus.NOT_DONE),
            TaskItem.id.not_in(has_it),
        )
        .order_by(TaskItem.id.asc())
        .all()
    )


def create_annotations(
    db: Session,
    task_items: list[TaskItem],
    labels_name: str,
    labels: dict,
    created_by: int | None,
) -> int:
    labels_json = json.dumps(labels, ensure_ascii=False)
    try:
        for item in task_items:
            db.add(
                Annotation(
                    task_item_id=item.id,
                    labels_name=labels_name,
                    labels_json=labels_json,
                    created_by=created_by,
                )
            )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise PersistenceError(f"Could not create '{labels_name}' annotations: {e}") from e
    return len(task_items)


def done_task_items(
    db: Session,
    task_id: int,
    *,
    from_: datetime | None = None,
    to: datetime | None = None,
    include_ongoing: bool = True,
) -> list[TaskItem]:
    """
    DONE task items with media item and annotations loaded, ordered by
    task item id then annotation id.

    Window is half-open: updated_at > from_ and updated_at <= to.
    include_ongoing=False keeps only items whose assignment is DONE.
    """
    query = (
        db.query(TaskItem)
        .options(
            joinedload(TaskItem.media_item),
            joinedload(TaskItem.task_assignment),
            selectinload(TaskItem.annotations),
        )
        .filter(TaskItem.task_id == task_id, TaskItem.status == int(TaskItemStatus.DONE))
    )

    if not include_ongoing:
        query = query.join(TaskAssignment, TaskAssignment.id == TaskItem.task_assignment_id).filter(
            TaskAssignment.status == int(TaskAssignmentStatus.DONE)
        )

    if from_ is not None:
        query = query.filter(TaskItem.updated_at > from_)

    if to is not None:
        query = query.filter(TaskItem.updated_at <= to)

    # refresh collections already loaded in this session (auto-create adds rows by id)
    return query.order_by(TaskItem.id.asc()).populate_existing().all()
