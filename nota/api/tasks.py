from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from nota.db.session import get_db
from nota.models.enums import JobType
from nota.models.media_source import MediaSource
from nota.models.project import Project
from nota.models.task_template import TaskTemplate
from nota.schemas.export import ExportOptions
from nota.schemas.media_source_config import MediaSourceConfig
from nota.schemas.task import TaskSummary, TaskWithCounts
from nota.services import tasks as task_service
from nota.services.job_dispatch import dispatch_job
from nota.services.jobs import create_job, get_last_jobs

router = APIRouter(prefix="/tasks", tags=["tasks"])


class TaskCreateRequest(BaseModel):
    project_id: int
    task_template_id: int
    media_source_id: int
    name: str
    description: str | None = None
    media_source_config: MediaSourceConfig = MediaSourceConfig()
    fetch_schedule: dict[str, Any] | None = None
    export_schedule: dict[str, Any] | None = None
    created_by: int | None = None


class JobStartedResponse(BaseModel):
    ok: bool
    task_id: int
    job_id: int
    celery_task_id: str


class TaskDetailResponse(BaseModel):
    ok: bool
    task: TaskSummary
    media_source_config: dict[str, Any]
    fetch_schedule: dict[str, Any] | None = None
    export_schedule: dict[str, Any] | None = None


class TaskListResponse(BaseModel):
    ok: bool
    tasks: list[TaskWithCounts]


def _get_task_or_404(db: Session, task_id: int):
    task = task_service.get_task(db, task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    return task


@router.post("", response_model=JobStartedResponse)
def create_task(req: TaskCreateRequest, db: Session = Depends(get_db)) -> JobStartedResponse:
    name = (req.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Task name is required")
    if not db.get(Project, req.project_id):
        raise HTTPException(status_code=400, detail="Unknown project")
    if not db.get(TaskTemplate, req.task_template_id):
        raise HTTPException(status_code=400, detail="Unknown task template")
    if not db.get(MediaSource, req.media_source_id):
        raise HTTPException(status_code=400, detail="Unknown media source")

    task = task_service.create_task(
        db,
        project_id=req.project_id,
        task_template_id=req.task_template_id,
        media_source_id=req.media_source_id,
        name=name,
        description=req.description,
        media_source_config=req.media_source_config,
        fetch_schedule=req.fetch_schedule,
        export_schedule=req.export_schedule,
        created_by=req.created_by,
    )

    job = create_job(db, JobType.TASK_FETCH, {"task_id": task.id, "refresh": False}, task.project_id, task.id)
    async_result = dispatch_job(JobType.TASK_FETCH, {"job_id": job.id, "task_id": task.id, "refresh": False})

    return JobStartedResponse(ok=True, task_id=task.id, job_id=job.id, celery_task_id=async_result.id)


@router.get("", response_model=TaskListResponse)
def list_tasks(db: Session = Depends(get_db), project_id: int | None = Query(default=None)) -> TaskListResponse:
    return TaskListResponse(ok=True, tasks=task_service.list_tasks_with_counts(db, project_id=project_id))


@router.get("/{task_id}", response_model=TaskDetailResponse)
def get_task(task_id: int, db: Session = Depends(get_db)) -> TaskDetailResponse:
    task = _get_task_or_404(db, task_id)
    return TaskDetailResponse(
        ok=True,
        task=TaskSummary(id=task.id, name=task.name, status=task.status),
        media_source_config=task_service.get_media_source_config(task).model_dump(by_alias=True),
        fetch_schedule=task_service.get_schedule(task.fetch_schedule_json),
        export_schedule=task_service.get_schedule(task.export_schedule_json),
    )


@router.post("/{task_id}/refresh", response_model=JobStartedResponse)
def refresh_task(task_id: int, db: Session = Depends(get_db)) -> JobStartedResponse:
    task = _get_task_or_404(db, task_id)
    job = create_job(db, JobType.TASK_FETCH, {"task_id": task.id, "refresh": True}, task.project_id, task.id)
    async_result = dispatch_job(JobType.TASK_FETCH, {"job_id": job.id, "task_id": task.id, "refresh": True})
    return JobStartedResponse(ok=True, task_id=task.id, job_id=job.id, celery_task_id=async_result.id)


@router.post("/{task_id}/export", response_model=JobStartedResponse)
def export(task_id: int, options: ExportOptions | None = None, db: Session = Depends(get_db)) -> JobStartedResponse:
    task = _get_task_or_404(db, task_id)
    payload = (options or ExportOptions()).model_dump(mode="json", by_alias=True)
    job = create_job(db, JobType.TASK_EXPORT, {"task_id": task.id, "options": payload}, task.project_id, task.id)
    async_result = dispatch_job(JobType.TASK_EXPORT, {"job_id": job.id, "task_id": task.id, "options": payload})
    return JobStartedResponse(ok=True, task_id=task.id, job_id=job.id, celery_task_id=async_result.id)


@router.get("/{task_id}/jobs")
def list_task_jobs(
    task_id: int,
    db: Session = Depends(get_db),
    job_type: str = Query(default=JobType.TASK_FETCH),
    limit: int = Query(default=10, ge=1, le=100),
):
    task = _get_task_or_404(db, task_id)
    jobs = get_last_jobs(db, task, job_type, limit=limit)
    return {
        "ok": True,
        "task_id": task.id,
        "jobs": [
            {
                "id": j.id,
                "job_type": j.job_type,
                "status": j.status,
                "error": j.error,
                "payload_json": j.payload_json,
                "created_at": j.created_at.isoformat() if j.created_at else None,
            }
            for j in jobs
        ],
    }


@router.delete("/{task_id}")
def delete_task(task_id: int, db: Session = Depends(get_db), user_id: int | None = Query(default=None)):
    task = _get_task_or_404(db, task_id)
    task_service.delete_task(db, task, user_id)
    return {"ok": True, "task_id": task.id, "status": task.status}
