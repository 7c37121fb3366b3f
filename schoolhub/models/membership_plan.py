"""Membership plan model."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from schoolhub.core.database import Base


class MembershipPlan(Base):
    """Membership plan: weekly attendance quota and monthly price."""

    __tablename__ = "membership_plans"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    days_per_week: Mapped[int] = mapped_column(Integer, nullable=False)
    monthly_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    # Relationships
    students: Mapped[list["Student"]] = relationship(
        "Student", back_populates="membership_plan"
    )

    __table_args__ = (
        CheckConstraint(
            "days_per_week BETWEEN 1 AND 7", name="ck_membership_plans_days_per_week"
        ),
    )

    def __repr__(self) -> str:
        return (
            f"<MembershipPlan(id={self.id}, name='{self.name}', "
            f"days_per_week={self.days_per_week}, active={self.is_active})>"
        )
