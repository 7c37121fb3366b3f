"""Student model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base


class Student(Base):
    """Student model for storing student information."""

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    membership_plan_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("membership_plans.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    membership_plan: Mapped[Optional["MembershipPlan"]] = relationship(
        "MembershipPlan", back_populates="students"
    )
    schedules: Mapped[list["StudentSchedule"]] = relationship(
        "StudentSchedule", back_populates="student", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name='{self.first_name} {self.last_name}')>"

    @property
    def full_name(self) -> str:
        """Get full name."""
        return f"{self.first_name} {self.last_name}"
