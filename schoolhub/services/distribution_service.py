"""Student distribution service: weekly day assignments per student."""

import logging
import random
from collections import Counter
from typing import Iterable, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from schoolhub.core.settings import settings
from schoolhub.models import WEEKDAYS, DayOfWeek, MembershipPlan, Student, StudentSchedule
from schoolhub.services.audit_service import log_audit
from schoolhub.services.distribution_board import (
    CamelModel,
    DistributionBoard,
    DistributionEntry,
    PlanSummary,
    unallocated_key,
)
from schoolhub.services.exceptions import DistributionValidationError

logger = logging.getLogger(__name__)


class DistributionSnapshot(DistributionBoard):
    """Board as loaded from the database, plus the full roster."""

    students: list[DistributionEntry] = []


class StudentScheduleDay(CamelModel):
    """One day of a student's weekly schedule."""

    day_of_week: DayOfWeek
    start_time: str = "09:00"
    end_time: str = "17:00"
    is_locked: bool = False


def plan_summary(student: Student) -> PlanSummary:
    plan = student.membership_plan
    if plan is None:
        return PlanSummary()
    return PlanSummary(name=plan.name, days_per_week=plan.days_per_week)


def pick_random_days(
    count: int,
    rng: random.Random,
    pool: Sequence[DayOfWeek] = WEEKDAYS,
) -> list[DayOfWeek]:
    """Pick up to ``count`` distinct days uniformly at random from ``pool``."""
    available = list(pool)
    picked = []
    while len(picked) < count and available:
        picked.append(available.pop(rng.randrange(len(available))))
    return picked


def _active_plan_students():
    """Active students holding an active membership plan."""
    return (
        select(Student)
        .join(Student.membership_plan)
        .where(Student.is_active == True, MembershipPlan.is_active == True)
        .options(selectinload(Student.membership_plan))
    )


class DistributionService:
    """Service for reading, saving and auto-allocating the weekly distribution."""

    def __init__(self, db: AsyncSession, rng: Optional[random.Random] = None):
        self.db = db
        self.rng = rng or random.Random(settings.auto_allocate_seed)

    async def load_distribution(self) -> DistributionSnapshot:
        """Build the roster, the weekday buckets and the unallocated placeholders."""
        students_result = await self.db.execute(
            _active_plan_students().order_by(Student.last_name, Student.first_name, Student.id)
        )
        students = students_result.scalars().all()

        schedules_result = await self.db.execute(
            select(StudentSchedule)
            .options(
                selectinload(StudentSchedule.student).selectinload(Student.membership_plan)
            )
            .order_by(StudentSchedule.id)
        )
        schedules = schedules_result.scalars().all()

        day_schedule: dict[DayOfWeek, list[DistributionEntry]] = {day: [] for day in WEEKDAYS}
        for schedule in schedules:
            day_schedule[schedule.day_of_week].append(
                DistributionEntry(
                    id=str(schedule.student_id),
                    student_id=schedule.student_id,
                    name=schedule.student.full_name,
                    membership_plan=plan_summary(schedule.student),
                    is_locked=schedule.is_locked,
                )
            )

        allocated = Counter(schedule.student_id for schedule in schedules)
        locked_students = {s.student_id for s in schedules if s.is_locked}

        roster = []
        unallocated = []
        for student in students:
            plan = plan_summary(student)
            roster.append(
                DistributionEntry(
                    id=str(student.id),
                    student_id=student.id,
                    name=student.full_name,
                    membership_plan=plan,
                    is_locked=student.id in locked_students,
                )
            )
            for ordinal in range(max(plan.days_per_week - allocated[student.id], 0)):
                unallocated.append(
                    DistributionEntry(
                        id=unallocated_key(student.id, ordinal),
                        student_id=student.id,
                        name=student.full_name,
                        membership_plan=plan,
                    )
                )

        logger.info(
            f"Loaded distribution: {len(roster)} students, {len(schedules)} slots, "
            f"{len(unallocated)} unallocated"
        )
        return DistributionSnapshot(
            students=roster,
            day_schedule=day_schedule,
            unallocated_students=unallocated,
        )

    async def save_distribution(
        self,
        board: DistributionBoard,
        user_name: str = "Administrator",
    ) -> dict:
        """Replace every stored slot with the board's weekday buckets.

        Unallocated placeholders are not stored. Raises
        DistributionValidationError before writing anything if a student
        appears twice on one day or does not exist.
        """
        rows = self._rows_from_board(board)
        await self._ensure_students_exist({row.student_id for row in rows})

        try:
            await self.db.execute(delete(StudentSchedule))
            self.db.add_all(rows)
            await log_audit(
                db=self.db,
                action_type="SAVE",
                entity_type="student_distribution",
                entity_id=None,
                entity_name="Weekly distribution",
                description=f"Saved weekly distribution with {len(rows)} slots",
                user_name=user_name,
                changes={
                    "slots_per_day": {
                        day.value: len(board.day_schedule[day]) for day in WEEKDAYS
                    },
                    "locked_slots": sum(1 for row in rows if row.is_locked),
                },
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error saving student distribution: {e}")
            raise

        logger.info(f"Saved student distribution: {len(rows)} slots")
        return {"success": True, "saved_slots": len(rows)}

    async def auto_allocate(self, user_name: str = "Administrator") -> dict:
        """Randomly assign every student without locked days to their quota of days.

        All unlocked slots are removed first, including those of students who
        also hold locked slots; those students are not re-allocated.
        """
        locked_student_ids = select(StudentSchedule.student_id).where(
            StudentSchedule.is_locked == True
        )
        targets_result = await self.db.execute(
            _active_plan_students()
            .where(Student.id.not_in(locked_student_ids))
            .order_by(Student.id)
        )
        targets = targets_result.scalars().all()

        try:
            await self.db.execute(
                delete(StudentSchedule).where(StudentSchedule.is_locked == False)
            )

            created = 0
            for student in targets:
                # Targets hold no locked slots, so the whole quota is open
                remaining = student.membership_plan.days_per_week
                for day in pick_random_days(remaining, self.rng):
                    self.db.add(
                        StudentSchedule(student_id=student.id, day_of_week=day, is_locked=False)
                    )
                    created += 1

            await log_audit(
                db=self.db,
                action_type="AUTO_ALLOCATE",
                entity_type="student_distribution",
                entity_id=None,
                entity_name="Weekly distribution",
                description=f"Auto-allocated {len(targets)} students into {created} slots",
                user_name=user_name,
                changes={"students": [student.id for student in targets], "created_slots": created},
            )
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error auto-allocating students: {e}")
            raise

        logger.info(f"Auto-allocated {len(targets)} students into {created} slots")
        return {"success": True, "allocated_students": len(targets), "created_slots": created}

    async def get_student_schedule(self, student_id: int) -> Optional[list[StudentScheduleDay]]:
        """Weekly days of one student in calendar order, or None if unknown."""
        student = await self.db.get(Student, student_id)
        if student is None:
            return None

        result = await self.db.execute(
            select(StudentSchedule).where(StudentSchedule.student_id == student_id)
        )
        schedules = sorted(
            result.scalars().all(), key=lambda s: WEEKDAYS.index(s.day_of_week)
        )
        return [
            StudentScheduleDay(day_of_week=s.day_of_week, is_locked=s.is_locked)
            for s in schedules
        ]

    def _rows_from_board(self, board: DistributionBoard) -> list[StudentSchedule]:
        rows = []
        seen = set()
        for day in WEEKDAYS:
            for entry in board.day_schedule[day]:
                if (entry.student_id, day) in seen:
                    raise DistributionValidationError(
                        f"{entry.name} is scheduled more than once for {day.value}"
                    )
                seen.add((entry.student_id, day))
                rows.append(
                    StudentSchedule(
                        student_id=entry.student_id,
                        day_of_week=day,
                        is_locked=entry.is_locked,
                    )
                )
        return rows

    async def _ensure_students_exist(self, student_ids: Iterable[int]) -> None:
        student_ids = set(student_ids)
        if not student_ids:
            return
        result = await self.db.execute(select(Student.id).where(Student.id.in_(student_ids)))
        missing = student_ids - set(result.scalars().all())
        if missing:
            raise DistributionValidationError(
                f"Unknown students: {', '.join(str(i) for i in sorted(missing))}"
            )
