from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nota.db.base import Base, utcnow
from nota.models.enums import TaskAssignmentStatus, TaskItemStatus, TaskStatus


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"), nullable=False, index=True)
    task_template_id: Mapped[int] = mapped_column(ForeignKey("task_templates.id"), nullable=False)
    media_source_id: Mapped[int] = mapped_column(ForeignKey("media_sources.id"), nullable=False)

    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=int(TaskStatus.CREATING), index=True)

    # JSON strings, decoded by nota.services.tasks
    media_source_config_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    fetch_schedule_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    export_schedule_json: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_fetch_scheduled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_export_scheduled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    updated_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    project = relationship("Project")
    task_template = relationship("TaskTemplate")
    media_source = relationship("MediaSource")
    task_items: Mapped[list["TaskItem"]] = relationship(back_populates="task", order_by="TaskItem.id")
    task_assignments: Mapped[list["TaskAssignment"]] = relationship(back_populates="task")


class TaskAssignment(Base):
    __tablename__ = "task_assignments"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=int(TaskAssignmentStatus.ASSIGNED))
    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    task: Mapped[Task] = relationship(back_populates="task_assignments")


class TaskItem(Base):
    __tablename__ = "task_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    task_id: Mapped[int] = mapped_column(ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    media_item_id: Mapped[int] = mapped_column(ForeignKey("media_items.id"), nullable=False, index=True)
    task_assignment_id: Mapped[int | None] = mapped_column(
        ForeignKey("task_assignments.id", ondelete="SET NULL"), nullable=True
    )
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=int(TaskItemStatus.NOT_DONE))

    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, index=True)

    task: Mapped[Task] = relationship(back_populates="task_items")
    media_item = relationship("MediaItem")
    task_assignment = relationship("TaskAssignment")
    annotations: Mapped[list["Annotation"]] = relationship(
        back_populates="task_item", order_by="Annotation.id", cascade="all, delete-orphan"
    )
