"""Tests for in-memory board moves and lock toggling."""

import pytest

from schoolhub.models import DayOfWeek
from schoolhub.services.distribution_board import (
    BoardMove,
    DistributionBoard,
    DistributionEntry,
    PlanSummary,
    apply_move,
    next_unallocated_key,
    parse_bucket,
    toggle_lock,
    unallocated_key,
)
from schoolhub.services.exceptions import InvalidMove, MoveRejected


# ─── Helpers ──────────────────────────────────────────────────────────────────

def day_entry(student_id: int, name: str, days_per_week: int = 3, locked: bool = False) -> DistributionEntry:
    return DistributionEntry(
        id=str(student_id),
        student_id=student_id,
        name=name,
        membership_plan=PlanSummary(name=f"{days_per_week} days", days_per_week=days_per_week),
        is_locked=locked,
    )


def placeholder(student_id: int, name: str, ordinal: int, days_per_week: int = 3) -> DistributionEntry:
    return day_entry(student_id, name, days_per_week).model_copy(
        update={"id": unallocated_key(student_id, ordinal)}
    )


def move(source: str, source_index: int, dest: str, dest_index: int = 0) -> BoardMove:
    return BoardMove(
        source_bucket=source,
        source_index=source_index,
        dest_bucket=dest,
        dest_index=dest_index,
    )


@pytest.fixture
def board() -> DistributionBoard:
    """Sam (3 days): MONDAY + 2 placeholders. Ada (2 days): MONDAY, TUESDAY."""
    return DistributionBoard(
        day_schedule={
            DayOfWeek.MONDAY: [day_entry(1, "Sam Lee"), day_entry(2, "Ada Byron", 2)],
            DayOfWeek.TUESDAY: [day_entry(2, "Ada Byron", 2)],
        },
        unallocated_students=[placeholder(1, "Sam Lee", 0), placeholder(1, "Sam Lee", 1)],
    )


def names(board: DistributionBoard, day: DayOfWeek) -> list[str]:
    return [entry.name for entry in board.day_schedule[day]]


# ─── Buckets and keys ─────────────────────────────────────────────────────────

def test_board_exposes_all_weekdays():
    board = DistributionBoard()
    assert list(board.day_schedule) == list(DayOfWeek)
    assert all(entries == [] for entries in board.day_schedule.values())


def test_board_reads_camel_case_payload():
    board = DistributionBoard.model_validate(
        {
            "daySchedule": {
                "FRIDAY": [
                    {
                        "id": "7",
                        "studentId": 7,
                        "name": "Kim Park",
                        "membershipPlan": {"name": "Basic", "daysPerWeek": 2},
                        "isLocked": True,
                    }
                ]
            },
            "unallocatedStudents": [],
        }
    )
    entry = board.day_schedule[DayOfWeek.FRIDAY][0]
    assert entry.student_id == 7
    assert entry.is_locked is True
    assert entry.membership_plan.days_per_week == 2


def test_parse_bucket():
    assert parse_bucket("unallocated") is None
    assert parse_bucket("day-MONDAY") is DayOfWeek.MONDAY
    assert parse_bucket("day:friday") is DayOfWeek.FRIDAY
    for bad in ("day-SATURDAY", "monday", "", "day-"):
        with pytest.raises(InvalidMove):
            parse_bucket(bad)


def test_unallocated_key_is_deterministic():
    assert unallocated_key(42, 0) == "42#0"
    assert unallocated_key(42, 3) == "42#3"


def test_next_unallocated_key_fills_gaps(board):
    board.unallocated_students = [placeholder(1, "Sam Lee", 0), placeholder(1, "Sam Lee", 2)]
    assert next_unallocated_key(board, 1) == "1#1"
    assert next_unallocated_key(board, 2) == "2#0"


# ─── Moves ────────────────────────────────────────────────────────────────────

def test_reorder_within_day(board):
    result = apply_move(board, move("day-MONDAY", 0, "day-MONDAY", 1))
    assert names(result, DayOfWeek.MONDAY) == ["Ada Byron", "Sam Lee"]
    # Original board untouched
    assert names(board, DayOfWeek.MONDAY) == ["Sam Lee", "Ada Byron"]


def test_reorder_within_unallocated(board):
    result = apply_move(board, move("unallocated", 0, "unallocated", 1))
    assert [e.id for e in result.unallocated_students] == ["1#1", "1#0"]


def test_unallocated_to_free_day_appends(board):
    result = apply_move(board, move("unallocated", 0, "day-TUESDAY", 0))
    assert names(result, DayOfWeek.TUESDAY) == ["Ada Byron", "Sam Lee"]
    placed = result.day_schedule[DayOfWeek.TUESDAY][-1]
    assert placed.id == "1"
    assert [e.id for e in result.unallocated_students] == ["1#1"]


def test_unallocated_to_occupied_day_is_rejected_without_changes(board):
    before = board.model_dump()
    with pytest.raises(MoveRejected) as exc_info:
        apply_move(board, move("unallocated", 0, "day-MONDAY", 0))
    assert "Sam Lee" in exc_info.value.message
    assert "MONDAY" in exc_info.value.message
    assert exc_info.value.day == "MONDAY"
    assert board.model_dump() == before


def test_rejection_is_repeatable(board):
    for _ in range(3):
        with pytest.raises(MoveRejected):
            apply_move(board, move("unallocated", 1, "day-MONDAY", 0))
    assert len(board.unallocated_students) == 2


def test_day_to_day_duplicate_rejected_and_free_day_accepted(board):
    # Ada already has TUESDAY
    with pytest.raises(MoveRejected):
        apply_move(board, move("day-MONDAY", 1, "day-TUESDAY", 0))

    result = apply_move(board, move("day-MONDAY", 1, "day-THURSDAY", 0))
    assert names(result, DayOfWeek.MONDAY) == ["Sam Lee"]
    assert names(result, DayOfWeek.THURSDAY) == ["Ada Byron"]


def test_day_to_unallocated_always_allowed(board):
    result = apply_move(board, move("day-MONDAY", 0, "unallocated", 0))
    assert names(result, DayOfWeek.MONDAY) == ["Ada Byron"]
    returned = result.unallocated_students[-1]
    assert returned.student_id == 1
    assert returned.id == "1#2"
    assert returned.is_locked is False


def test_quota_check_blocks_extra_day(board):
    # Ada uses both of her 2 days; a stray placeholder cannot add a third
    board.unallocated_students.append(placeholder(2, "Ada Byron", 0, days_per_week=2))
    with pytest.raises(MoveRejected) as exc_info:
        apply_move(board, move("unallocated", 2, "day-FRIDAY", 0))
    assert "2 of 2" in exc_info.value.message

    result = apply_move(board, move("unallocated", 2, "day-FRIDAY", 0), enforce_plan_quota=False)
    assert names(result, DayOfWeek.FRIDAY) == ["Ada Byron"]


@pytest.mark.parametrize(
    "bad_move",
    [
        move("day-MONDAY", 5, "day-FRIDAY", 0),
        move("unallocated", -1, "day-FRIDAY", 0),
        move("day-WEDNESDAY", 0, "unallocated", 0),
        move("day-MONDAY", 0, "day-FRIDAY", -2),
        move("weekend", 0, "day-FRIDAY", 0),
    ],
)
def test_malformed_moves_raise_invalid_move(board, bad_move):
    with pytest.raises(InvalidMove):
        apply_move(board, bad_move)


# ─── Locking ──────────────────────────────────────────────────────────────────

def test_toggle_lock_locks_then_unlocks_all_days(board):
    locked = toggle_lock(board, 2)
    ada_days = [
        e for entries in locked.day_schedule.values() for e in entries if e.student_id == 2
    ]
    assert len(ada_days) == 2
    assert all(e.is_locked for e in ada_days)
    # Sam untouched
    assert locked.day_schedule[DayOfWeek.MONDAY][0].is_locked is False

    unlocked = toggle_lock(locked, 2)
    assert not any(e.is_locked for entries in unlocked.day_schedule.values() for e in entries)


def test_toggle_lock_with_mixed_state_unlocks(board):
    board.day_schedule[DayOfWeek.MONDAY][1].is_locked = True
    result = toggle_lock(board, 2)
    assert not any(
        e.is_locked for entries in result.day_schedule.values() for e in entries if e.student_id == 2
    )


def test_toggle_lock_requires_scheduled_student(board):
    with pytest.raises(InvalidMove):
        toggle_lock(board, 99)
