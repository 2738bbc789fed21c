from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nota.db.base import Base, utcnow


class MediaSource(Base):
    __tablename__ = "media_sources"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False, default="filesystem")  # datasource plugin
    config_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")  # {"root": ..., "exportPath": ...}
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    media_items: Mapped[list["MediaItem"]] = relationship(back_populates="media_source")


class MediaItem(Base):
    __tablename__ = "media_items"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    media_source_id: Mapped[int] = mapped_column(
        ForeignKey("media_sources.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # path is the resource (directory relative to the source root), name the file name
    name: Mapped[str] = mapped_column(String(512), nullable=False)
    path: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    metadata_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    media_source: Mapped[MediaSource] = relationship(back_populates="media_items")

    __table_args__ = (Index("idx_media_items_source_path", "media_source_id", "path"),)
