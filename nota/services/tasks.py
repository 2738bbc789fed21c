from __future__ import annotations

import json
from typing import Any

from sqlalchemy import and_, case, func
from sqlalchemy.orm import Session

from nota.models.enums import TaskItemStatus, TaskStatus
from nota.models.task import Task, TaskItem
from nota.schemas.media_source_config import MediaSourceConfig
from nota.schemas.task import TaskSummary, TaskWithCounts
from nota.schemas.template import TemplateDefinition
from nota.services import task_status


def _dump_schedule(schedule: dict[str, Any] | None) -> str | None:
    return json.dumps(schedule, ensure_ascii=False) if schedule else None


def create_task(
    db: Session,
    *,
    project_id: int,
    task_template_id: int,
    media_source_id: int,
    name: str,
    description: str | None = None,
    media_source_config: MediaSourceConfig | None = None,
    fetch_schedule: dict[str, Any] | None = None,
    export_schedule: dict[str, Any] | None = None,
    created_by: int | None = None,
) -> Task:
    task = Task(
        project_id=project_id,
        task_template_id=task_template_id,
        media_source_id=media_source_id,
        name=name,
        description=description,
        status=int(TaskStatus.CREATING),
        media_source_config_json=(media_source_config or MediaSourceConfig()).to_json(),
        fetch_schedule_json=_dump_schedule(fetch_schedule),
        export_schedule_json=_dump_schedule(export_schedule),
        is_fetch_scheduled=bool(fetch_schedule),
        is_export_scheduled=bool(export_schedule),
        created_by=created_by,
        updated_by=created_by,
    )
    db.add(task)
    db.commit()
    db.refresh(task)
    return task


def get_task(db: Session, task_id: int, include_deleted: bool = False) -> Task | None:
    query = db.query(Task).filter(Task.id == task_id)
    if not include_deleted:
        query = query.filter(Task.status != int(TaskStatus.DELETED))
    return query.first()


def get_task_summary(db: Session, task_id: int) -> TaskSummary | None:
    row = (
        db.query(Task.id, Task.name, Task.status)
        .filter(Task.id == task_id, Task.status != int(TaskStatus.DELETED))
        .first()
    )
    if not row:
        return None
    return TaskSummary(id=row.id, name=row.name, status=row.status)


def list_tasks_with_counts(db: Session, project_id: int | None = None) -> list[TaskWithCounts]:
    """Non-deleted tasks with total / done / assignable task item counts."""
    done = func.coalesce(func.sum(case((TaskItem.status == int(TaskItemStatus.DONE), 1), else_=0)), 0)
    assignable = func.coalesce(
        func.sum(case((and_(TaskItem.id.is_not(None), TaskItem.task_assignment_id.is_(None)), 1), else_=0)),
        0,
    )

    query = (
        db.query(
            Task.id,
            Task.name,
            Task.status,
            func.count(TaskItem.id).label("total"),
            done.label("done"),
            assignable.label("assignable"),
        )
        .outerjoin(TaskItem, TaskItem.task_id == Task.id)
        .filter(Task.status != int(TaskStatus.DELETED))
    )
    if project_id is not None:
        query = query.filter(Task.project_id == project_id)

    rows = query.group_by(Task.id, Task.name, Task.status).order_by(Task.id.asc()).all()
    return [
        TaskWithCounts(
            id=r.id,
            name=r.name,
            status=r.status,
            total=int(r.total or 0),
            done=int(r.done or 0),
            assignable=int(r.assignable or 0),
        )
        for r in rows
    ]


def get_media_source_config(task: Task) -> MediaSourceConfig:
    return MediaSourceConfig.from_json(task.media_source_config_json)


def get_template(task: Task) -> TemplateDefinition:
    return TemplateDefinition.from_json(task.task_template.template_json if task.task_template else None)


def get_schedule(raw: str | None) -> dict[str, Any] | None:
    # opaque to the pipeline; the scheduler interprets it
    return json.loads(raw) if raw else None


def delete_task(db: Session, task: Task, user_id: int | None = None) -> Task:
    task_status.soft_delete(task, user_id)
    db.commit()
    return task
