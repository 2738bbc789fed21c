from __future__ import annotations

from typing import Any, Dict

from nota.models.enums import JobType
from nota.worker import tasks as worker_tasks


# Map API-level job_type -> Celery task function (task object)
JOB_TYPE_TO_TASK = {
    JobType.TASK_FETCH: worker_tasks.fetch_task_items,
    JobType.TASK_EXPORT: worker_tasks.export_task,
}


def dispatch_job(job_type: str, payload: Dict[str, Any] | None = None):
    """
    Dispatch using task objects (.delay/.apply_async) so ENV=test eager mode works.
    Returns celery result object (EagerResult or AsyncResult).
    """
    payload = payload or {}

    task = JOB_TYPE_TO_TASK.get(job_type)
    if not task:
        raise ValueError(f"Unknown job_type: {job_type}")

    return task.apply_async(kwargs=payload)
