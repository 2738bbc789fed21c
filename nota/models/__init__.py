from nota.models.project import Project
from nota.models.media_source import MediaItem, MediaSource
from nota.models.task_template import TaskTemplate
from nota.models.task import Task, TaskAssignment, TaskItem
from nota.models.annotation import Annotation
from nota.models.job import Job

__all__ = [
    "Project",
    "MediaSource",
    "MediaItem",
    "TaskTemplate",
    "Task",
    "TaskAssignment",
    "TaskItem",
    "Annotation",
    "Job",
]
