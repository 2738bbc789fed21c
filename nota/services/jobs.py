import json
from typing import Any

from sqlalchemy.orm import Session

from nota.models.job import Job
from nota.models.task import Task


def create_job(
    db: Session,
    job_type: str,
    payload: dict,
    project_id: int | None = None,
    resource_id: int | None = None,
) -> Job:
    job = Job(
        job_type=job_type,
        status="queued",
        project_id=project_id,
        resource_id=resource_id,
        payload_json=json.dumps(payload or {}, ensure_ascii=False),
    )
    db.add(job)
    db.commit()
    db.refresh(job)
    return job


def set_job_status(db: Session, job_id: int, status: str, error: str | None = None) -> Job:
    job = db.query(Job).filter(Job.id == job_id).one()
    job.status = status
    job.error = error
    db.commit()
    db.refresh(job)
    return job


def merge_job_payload(db: Session, job_id: int, patch: dict[str, Any]) -> Job:
    """
    Merge a patch into payload_json.
    - Keeps existing keys
    - Overwrites keys present in patch
    """
    job = db.query(Job).filter(Job.id == job_id).one()
    base: dict[str, Any]
    try:
        base = json.loads(job.payload_json or "{}")
        if not isinstance(base, dict):
            base = {}
    except json.JSONDecodeError:
        base = {}

    for k, v in (patch or {}).items():
        base[k] = v

    job.payload_json = json.dumps(base, ensure_ascii=False)
    db.commit()
    db.refresh(job)
    return job


def get_last_jobs(db: Session, task: Task, job_type: str, limit: int = 10) -> list[Job]:
    """Most recent fetch or export jobs of a task, newest first."""
    return (
        db.query(Job)
        .filter(
            Job.project_id == task.project_id,
            Job.resource_id == task.id,
            Job.job_type == job_type,
        )
        .order_by(Job.created_at.desc(), Job.id.desc())
        .limit(limit)
        .all()
    )
