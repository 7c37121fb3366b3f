"""Seed database with sample data."""

import asyncio
import sys
from decimal import Decimal

sys.path.append(".")

from schoolhub.core.database import AsyncSessionLocal, init_db
from schoolhub.models import DayOfWeek, MembershipPlan, Student, StudentSchedule


async def seed_data():
    """Seed database with sample data."""
    await init_db()

    async with AsyncSessionLocal() as db:
        # Create membership plans
        plans = [
            MembershipPlan(name="Basic", description="Two days a week", days_per_week=2, monthly_price=Decimal("120.00")),
            MembershipPlan(name="Standard", description="Three days a week", days_per_week=3, monthly_price=Decimal("170.00")),
            MembershipPlan(name="Full week", description="Every weekday", days_per_week=5, monthly_price=Decimal("260.00")),
        ]

        for plan in plans:
            db.add(plan)

        await db.commit()

        # Create students
        names = [
            ("Anna", "Kowalska"),
            ("Ben", "Miller"),
            ("Chloe", "Martin"),
            ("David", "Novak"),
            ("Emma", "Schmidt"),
            ("Felix", "Bauer"),
            ("Grace", "Wilson"),
            ("Hugo", "Dubois"),
        ]
        students = [
            Student(
                first_name=first_name,
                last_name=last_name,
                membership_plan_id=plans[index % len(plans)].id,
            )
            for index, (first_name, last_name) in enumerate(names)
        ]

        for student in students:
            db.add(student)

        await db.commit()

        # Lock the first student onto fixed days
        schedules = [
            StudentSchedule(student_id=students[0].id, day_of_week=DayOfWeek.MONDAY, is_locked=True),
            StudentSchedule(student_id=students[0].id, day_of_week=DayOfWeek.WEDNESDAY, is_locked=True),
        ]

        for schedule in schedules:
            db.add(schedule)

        await db.commit()

        print("Sample data seeded successfully!")
        print("Created:")
        print(f"  - {len(plans)} membership plans")
        print(f"  - {len(students)} students")
        print(f"  - {len(schedules)} locked schedules")


if __name__ == "__main__":
    asyncio.run(seed_data())
