from enum import IntEnum


class TaskStatus(IntEnum):
    DELETED = -100
    UPDATING_ERROR = -2
    CREATING_ERROR = -1
    CREATING = 0
    UPDATING = 1
    HIDDEN = 50
    READY = 100
    DONE = 500


class TaskItemStatus(IntEnum):
    NOT_DONE = 0
    DONE = 1


class TaskAssignmentStatus(IntEnum):
    ASSIGNED = 0
    DONE = 1


class AnnotationStatus(IntEnum):
    NOT_VALIDATED = 0
    VALIDATED = 1


class JobType:
    TASK_FETCH = "task_fetch"
    TASK_EXPORT = "task_export"
