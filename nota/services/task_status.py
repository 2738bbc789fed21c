"""
Task lifecycle.

    CREATING -> READY | CREATING_ERROR      (first ingestion only)
    READY <-> UPDATING -> READY | UPDATING_ERROR
    READY / HIDDEN / DONE reachable from each other (admin actions)
    any non-DELETED -> DELETED              (terminal)
"""

from __future__ import annotations

from nota.models.enums import TaskStatus
from nota.models.task import Task
from nota.services.errors import InvalidTransition

ALLOWED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.CREATING: frozenset({TaskStatus.READY, TaskStatus.CREATING_ERROR}),
    TaskStatus.CREATING_ERROR: frozenset(),
    TaskStatus.READY: frozenset({TaskStatus.UPDATING, TaskStatus.HIDDEN, TaskStatus.DONE}),
    TaskStatus.UPDATING: frozenset({TaskStatus.READY, TaskStatus.UPDATING_ERROR}),
    TaskStatus.UPDATING_ERROR: frozenset({TaskStatus.UPDATING, TaskStatus.READY}),
    TaskStatus.HIDDEN: frozenset({TaskStatus.READY, TaskStatus.DONE}),
    TaskStatus.DONE: frozenset({TaskStatus.READY, TaskStatus.HIDDEN}),
    TaskStatus.DELETED: frozenset(),
}


def can_transition(prior: int, new: int) -> bool:
    prior, new = TaskStatus(prior), TaskStatus(new)
    if new == TaskStatus.DELETED:
        return prior != TaskStatus.DELETED
    return new in ALLOWED_TRANSITIONS[prior]


def transition(task: Task, new: int) -> Task:
    """Apply a legal status change in memory; the caller commits."""
    if not can_transition(task.status, new):
        raise InvalidTransition(task.status, new)
    task.status = int(new)
    return task


def status_after_ingestion(prior: int, refresh: bool, succeeded: bool) -> TaskStatus:
    """
    Status a task ends up in after an ingestion run.

    Refresh runs never move the status, whatever the outcome, so a task that
    annotators are working on is not regressed by a failed scheduled fetch.
    """
    if refresh:
        return TaskStatus(prior)
    return TaskStatus.READY if succeeded else TaskStatus.CREATING_ERROR


def soft_delete(task: Task, user_id: int | None) -> Task:
    transition(task, TaskStatus.DELETED)
    task.updated_by = user_id
    return task


def can_be_annotated(task: Task) -> bool:
    return task.status not in (TaskStatus.DELETED, TaskStatus.CREATING_ERROR, TaskStatus.DONE)


def is_schedulable(task: Task) -> bool:
    return task.status != TaskStatus.DELETED
