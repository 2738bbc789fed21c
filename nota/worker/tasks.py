import logging

from sqlalchemy.orm import Session

import nota.models  # noqa: F401  (register all mappers)
from nota.db.session import SessionLocal
from nota.schemas.export import ExportOptions
from nota.services import export as export_service
from nota.services.ingestion import run_ingestion
from nota.services.jobs import merge_job_payload, set_job_status
from nota.services.task_status import is_schedulable
from nota.services.tasks import get_task
from nota.worker.celery_app import celery_app

logger = logging.getLogger(__name__)


def _skip_deleted(db: Session, job_id: int, task_id: int) -> dict:
    logger.info("Task %s is deleted; job %s skipped", task_id, job_id)
    merge_job_payload(db, job_id, {"skipped": "task deleted"})
    set_job_status(db, job_id, "done")
    return {"ok": True, "job_id": job_id, "task_id": task_id, "skipped": True}


@celery_app.task(name="tasks.fetch_task_items")
def fetch_task_items(job_id: int, task_id: int, refresh: bool = False) -> dict:
    """
    First fetch (refresh=False) or refresh of a task's items.
    A failed refresh leaves the task status alone but marks the job failed.
    """
    db: Session = SessionLocal()
    try:
        set_job_status(db, job_id, "running")
        task = get_task(db, task_id, include_deleted=True)
        if not task:
            set_job_status(db, job_id, "failed", error=f"Task {task_id} not found")
            return {"ok": False, "job_id": job_id, "error": f"Task {task_id} not found"}
        if not is_schedulable(task):
            return _skip_deleted(db, job_id, task_id)

        outcome = run_ingestion(db, task, refresh=refresh)

        merge_job_payload(db, job_id, {"task_id": task_id, "refresh": refresh, "added": outcome.added})
        if outcome.succeeded:
            set_job_status(db, job_id, "done")
        else:
            set_job_status(db, job_id, "failed", error=str(outcome.error))
        return {"ok": outcome.succeeded, "job_id": job_id, "task_id": task_id, "added": outcome.added}
    except Exception as e:
        db.rollback()
        set_job_status(db, job_id, "failed", error=str(e))
        raise
    finally:
        db.close()


@celery_app.task(name="tasks.export_task")
def export_task(job_id: int, task_id: int, options: dict | None = None) -> dict:
    db: Session = SessionLocal()
    try:
        set_job_status(db, job_id, "running")
        task = get_task(db, task_id, include_deleted=True)
        if not task:
            set_job_status(db, job_id, "failed", error=f"Task {task_id} not found")
            return {"ok": False, "job_id": job_id, "error": f"Task {task_id} not found"}
        if not is_schedulable(task):
            return _skip_deleted(db, job_id, task_id)

        result = export_service.export_task(db, task, ExportOptions.model_validate(options or {}))

        merge_job_payload(db, job_id, result.model_dump(mode="json"))
        set_job_status(db, job_id, "done")
        return {"ok": True, "job_id": job_id, "task_id": task_id, **result.model_dump(mode="json")}
    except Exception as e:
        db.rollback()
        set_job_status(db, job_id, "failed", error=str(e))
        raise
    finally:
        db.close()
