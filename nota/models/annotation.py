from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nota.db.base import Base, utcnow
from nota.models.enums import AnnotationStatus


class Annotation(Base):
    __tablename__ = "annotations"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    task_item_id: Mapped[int] = mapped_column(
        ForeignKey("task_items.id", ondelete="CASCADE"), nullable=False, index=True
    )

    labels_name: Mapped[str] = mapped_column(String(255), nullable=False)
    labels_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")  # JSON string
    boundaries_json: Mapped[str | None] = mapped_column(Text, nullable=True)  # JSON string, null for whole-item labels
    status: Mapped[int] = mapped_column(Integer, nullable=False, default=int(AnnotationStatus.NOT_VALIDATED))

    created_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    task_item = relationship("TaskItem", back_populates="annotations")

    __table_args__ = (Index("idx_annotations_item_labels_name", "task_item_id", "labels_name"),)
