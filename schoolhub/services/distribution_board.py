"""In-memory weekly distribution board.

The board is what the distribution page works on between loading and saving:
five weekday buckets of scheduled students plus the "unallocated" pool, which
holds one placeholder per day a student still needs. Moves and lock toggles
are applied to a copy of the board and never touch the database; the result
is persisted only through an explicit save.

Bucket ids follow the drag-and-drop droppable ids: ``"unallocated"`` or
``"day-MONDAY"`` .. ``"day-FRIDAY"`` (``"day:MONDAY"`` is accepted as well).
"""

import logging
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from schoolhub.models.student_schedule import WEEKDAYS, DayOfWeek
from schoolhub.services.exceptions import InvalidMove, MoveRejected

logger = logging.getLogger(__name__)

UNALLOCATED = "unallocated"
NO_PLAN_NAME = "No Plan"


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON with the distribution page."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlanSummary(CamelModel):
    """Membership plan fields shown on a board card."""

    name: str = NO_PLAN_NAME
    days_per_week: int = 0


class DistributionEntry(CamelModel):
    """One card on the board.

    Day entries use the student id as ``id``; unallocated placeholders use
    ``"<student_id>#<ordinal>"``.
    """

    id: str
    student_id: int
    name: str
    membership_plan: PlanSummary = Field(default_factory=PlanSummary)
    is_locked: bool = False


class DistributionBoard(CamelModel):
    """Weekday buckets plus the unallocated pool."""

    day_schedule: dict[DayOfWeek, list[DistributionEntry]] = Field(
        default_factory=dict, validate_default=True
    )
    unallocated_students: list[DistributionEntry] = Field(default_factory=list)

    @field_validator("day_schedule")
    @classmethod
    def fill_missing_days(
        cls, value: dict[DayOfWeek, list[DistributionEntry]]
    ) -> dict[DayOfWeek, list[DistributionEntry]]:
        """Always expose all five weekdays, in calendar order."""
        return {day: list(value.get(day, [])) for day in WEEKDAYS}


class BoardMove(CamelModel):
    """A single drag-and-drop move."""

    source_bucket: str
    source_index: int
    dest_bucket: str
    dest_index: int


def unallocated_key(student_id: int, ordinal: int) -> str:
    """Stable display key of a student's n-th unallocated placeholder."""
    return f"{student_id}#{ordinal}"


def parse_bucket(bucket_id: str) -> Optional[DayOfWeek]:
    """Return the weekday of a bucket id, or None for the unallocated pool."""
    if bucket_id == UNALLOCATED:
        return None
    for prefix in ("day-", "day:"):
        if bucket_id.startswith(prefix):
            try:
                return DayOfWeek(bucket_id[len(prefix):].upper())
            except ValueError:
                break
    raise InvalidMove(f"Unknown bucket '{bucket_id}'")


def bucket_id(day: Optional[DayOfWeek]) -> str:
    """Inverse of parse_bucket."""
    return UNALLOCATED if day is None else f"day-{day.value}"


def is_student_already_in_day(board: DistributionBoard, student_id: int, day: DayOfWeek) -> bool:
    return any(entry.student_id == student_id for entry in board.day_schedule[day])


def scheduled_day_count(board: DistributionBoard, student_id: int) -> int:
    """Number of weekday buckets holding the student."""
    return sum(
        1 for day in WEEKDAYS if is_student_already_in_day(board, student_id, day)
    )


def next_unallocated_key(board: DistributionBoard, student_id: int) -> str:
    """Smallest free placeholder key for the student."""
    used = {entry.id for entry in board.unallocated_students if entry.student_id == student_id}
    ordinal = 0
    while unallocated_key(student_id, ordinal) in used:
        ordinal += 1
    return unallocated_key(student_id, ordinal)


def _bucket(board: DistributionBoard, day: Optional[DayOfWeek]) -> list[DistributionEntry]:
    return board.unallocated_students if day is None else board.day_schedule[day]


def apply_move(
    board: DistributionBoard,
    move: BoardMove,
    enforce_plan_quota: bool = True,
) -> DistributionBoard:
    """Apply one drag-and-drop move and return the resulting board.

    The input board is never modified. Raises InvalidMove for unknown buckets
    or indexes and MoveRejected when the student is already on the target day
    (or, with ``enforce_plan_quota``, already uses every day of their plan).
    """
    source_day = parse_bucket(move.source_bucket)
    dest_day = parse_bucket(move.dest_bucket)

    result = board.model_copy(deep=True)
    source = _bucket(result, source_day)
    if not 0 <= move.source_index < len(source):
        raise InvalidMove(
            f"No entry at index {move.source_index} in '{move.source_bucket}'"
        )
    if move.dest_index < 0:
        raise InvalidMove(f"Invalid destination index {move.dest_index}")

    entry = source[move.source_index]

    # Reordering within one bucket
    if source_day == dest_day:
        source.pop(move.source_index)
        source.insert(move.dest_index, entry)
        return result

    # Back to the unallocated pool
    if dest_day is None:
        source.pop(move.source_index)
        result.unallocated_students.append(
            entry.model_copy(
                update={
                    "id": next_unallocated_key(result, entry.student_id),
                    "is_locked": False,
                }
            )
        )
        logger.info(f"Moved {entry.name} from {source_day.value} to unallocated")
        return result

    if is_student_already_in_day(result, entry.student_id, dest_day):
        message = f"{entry.name} is already scheduled for {dest_day.value}. Cannot add duplicate."
        logger.warning(message)
        raise MoveRejected(message, student_id=entry.student_id, day=dest_day.value)

    if source_day is None and enforce_plan_quota:
        quota = entry.membership_plan.days_per_week
        scheduled = scheduled_day_count(result, entry.student_id)
        if scheduled >= quota:
            message = (
                f"{entry.name} is already scheduled for {scheduled} of "
                f"{quota} days per week. Cannot add {dest_day.value}."
            )
            logger.warning(message)
            raise MoveRejected(message, student_id=entry.student_id, day=dest_day.value)

    source.pop(move.source_index)
    if source_day is None:
        entry = entry.model_copy(update={"id": str(entry.student_id)})
    result.day_schedule[dest_day].append(entry)

    logger.info(f"Moved {entry.name} from {bucket_id(source_day)} to {dest_day.value}")
    return result


def toggle_lock(board: DistributionBoard, student_id: int) -> DistributionBoard:
    """Lock or unlock every day entry of a student.

    If any of the student's days is locked, all of them are unlocked;
    otherwise all of them are locked. The student's days always share one
    lock state: a mixed board is unlocked as a whole, entries are never
    flipped one by one.
    """
    result = board.model_copy(deep=True)
    entries = [
        entry
        for day in WEEKDAYS
        for entry in result.day_schedule[day]
        if entry.student_id == student_id
    ]
    if not entries:
        raise InvalidMove(f"Student {student_id} is not scheduled on any day")

    locked = not any(entry.is_locked for entry in entries)
    for entry in entries:
        entry.is_locked = locked

    logger.info(f"{'Locked' if locked else 'Unlocked'} student {student_id} on {len(entries)} day(s)")
    return result
