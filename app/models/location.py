from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Enum, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Location(Base):
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    longitude: Mapped[float] = mapped_column(Float)
    latitude: Mapped[float] = mapped_column(Float)
    info: Mapped[str] = mapped_column(Text, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    tasks: Mapped[list["Task"]] = relationship(
        back_populates="location", cascade="all, delete-orphan", order_by="Task.id"
    )


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "date_to_complete IS NULL OR date_to_complete >= date_to_start",
            name="tasks_complete_after_start",
        ),
        CheckConstraint("tries >= 0", name="tasks_tries_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    location_id: Mapped[int] = mapped_column(ForeignKey("locations.id", ondelete="CASCADE"), index=True)

    # Title and description stored together: first line is the title
    info: Mapped[str] = mapped_column(Text)

    date_added: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    date_to_start: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    date_to_complete: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    date_completed: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    completion_status: Mapped[Optional[str]] = mapped_column(
        Enum("done", "postponed", "canceled", name="completion_status_enum"),
        nullable=True,
    )
    tries: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    # Relationships
    location: Mapped["Location"] = relationship(back_populates="tasks")
