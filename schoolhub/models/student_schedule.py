"""Student schedule model."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SQLEnum, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base


class DayOfWeek(str, Enum):
    """Weekdays a student can be distributed to."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"


# Calendar order, used for buckets and exports
WEEKDAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)


class StudentSchedule(Base):
    """One (student, weekday) assignment.

    A locked row is kept by auto-allocation, and a student holding any locked
    row is skipped by it entirely.
    """

    __tablename__ = "student_schedules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    student_id: Mapped[int] = mapped_column(
        ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True
    )
    day_of_week: Mapped[DayOfWeek] = mapped_column(SQLEnum(DayOfWeek), nullable=False)
    is_locked: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    student: Mapped["Student"] = relationship("Student", back_populates="schedules")

    __table_args__ = (
        UniqueConstraint("student_id", "day_of_week", name="uq_student_schedules_student_day"),
    )

    def __repr__(self) -> str:
        return (
            f"<StudentSchedule(id={self.id}, student_id={self.student_id}, "
            f"day='{self.day_of_week.value if self.day_of_week else None}', "
            f"locked={self.is_locked})>"
        )
