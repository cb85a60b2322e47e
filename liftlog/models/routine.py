"""Routine - ordered list of templates (a training program)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.db.base import Base
from liftlog.models._common import utcnow


class Routine(Base):
    __tablename__ = "routines"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    templates: Mapped[list["RoutineTemplate"]] = relationship(
        "RoutineTemplate",
        back_populates="routine",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="RoutineTemplate.position",
    )


class RoutineTemplate(Base):
    """Template slot in a routine."""

    __tablename__ = "routine_templates"
    __table_args__ = (
        UniqueConstraint("routine_id", "position", name="uq_routine_templates_position"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    routine_id: Mapped[int] = mapped_column(
        ForeignKey("routines.id", ondelete="CASCADE"), nullable=False, index=True
    )
    template_id: Mapped[int] = mapped_column(
        ForeignKey("workout_templates.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    routine: Mapped["Routine"] = relationship("Routine", back_populates="templates")
    template: Mapped["WorkoutTemplate"] = relationship("WorkoutTemplate")
