from __future__ import annotations

from pydantic import BaseModel


class TaskSummary(BaseModel):
    id: int
    name: str
    status: int


class TaskWithCounts(TaskSummary):
    total: int
    done: int
    assignable: int
