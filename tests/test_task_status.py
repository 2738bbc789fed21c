import pytest

from nota.models import Task
from nota.models.enums import TaskStatus
from nota.services import task_status
from nota.services.errors import InvalidTransition


@pytest.mark.parametrize(
    "prior, refresh, succeeded, expected",
    [
        (TaskStatus.CREATING, False, True, TaskStatus.READY),
        (TaskStatus.CREATING, False, False, TaskStatus.CREATING_ERROR),
        (TaskStatus.READY, True, True, TaskStatus.READY),
        (TaskStatus.READY, True, False, TaskStatus.READY),
        (TaskStatus.DONE, True, False, TaskStatus.DONE),
        (TaskStatus.HIDDEN, True, True, TaskStatus.HIDDEN),
    ],
)
def test_status_after_ingestion(prior, refresh, succeeded, expected):
    assert task_status.status_after_ingestion(prior, refresh, succeeded) == expected


def test_creating_error_only_from_first_run():
    for prior in TaskStatus:
        if prior == TaskStatus.CREATING:
            continue
        assert task_status.status_after_ingestion(prior, True, False) != TaskStatus.CREATING_ERROR


def test_transitions():
    assert task_status.can_transition(TaskStatus.CREATING, TaskStatus.READY)
    assert task_status.can_transition(TaskStatus.READY, TaskStatus.UPDATING)
    assert task_status.can_transition(TaskStatus.UPDATING, TaskStatus.UPDATING_ERROR)
    assert task_status.can_transition(TaskStatus.DONE, TaskStatus.HIDDEN)
    assert not task_status.can_transition(TaskStatus.READY, TaskStatus.CREATING_ERROR)
    assert not task_status.can_transition(TaskStatus.DELETED, TaskStatus.READY)


def test_any_live_status_can_be_deleted_once():
    for prior in TaskStatus:
        expected = prior != TaskStatus.DELETED
        assert task_status.can_transition(prior, TaskStatus.DELETED) is expected


def test_soft_delete_and_flags():
    task = Task(name="t", status=int(TaskStatus.READY))
    assert task_status.can_be_annotated(task)
    assert task_status.is_schedulable(task)

    task_status.soft_delete(task, user_id=3)

    assert task.status == TaskStatus.DELETED
    assert task.updated_by == 3
    assert not task_status.can_be_annotated(task)
    assert not task_status.is_schedulable(task)
    with pytest.raises(InvalidTransition):
        task_status.soft_delete(task, user_id=3)


def test_transition_rejects_illegal_move():
    task = Task(name="t", status=int(TaskStatus.CREATING_ERROR))
    assert not task_status.can_be_annotated(task)
    with pytest.raises(InvalidTransition):
        task_status.transition(task, TaskStatus.READY)
