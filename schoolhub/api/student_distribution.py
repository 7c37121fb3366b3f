"""Student distribution API endpoints."""

import logging
from datetime import datetime

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import StreamingResponse

from schoolhub.api.dependencies import DbSession, StaffUser
from schoolhub.core.settings import settings
from schoolhub.services.distribution_board import (
    BoardMove,
    CamelModel,
    DistributionBoard,
    apply_move,
    toggle_lock,
)
from schoolhub.services.distribution_export import build_distribution_workbook
from schoolhub.services.distribution_service import DistributionService, DistributionSnapshot
from schoolhub.services.exceptions import (
    DistributionValidationError,
    InvalidMove,
    MoveRejected,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/student-distribution", tags=["student-distribution"])


class MoveRequest(CamelModel):
    """Board plus the move to apply to it."""

    board: DistributionBoard
    move: BoardMove


class LockToggleRequest(CamelModel):
    """Board plus the student whose days are locked or unlocked."""

    board: DistributionBoard
    student_id: int


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


@router.get("", response_model=DistributionSnapshot)
async def get_student_distribution(
    db: DbSession,
    user: StaffUser,
) -> DistributionSnapshot:
    """Get the current weekly distribution."""
    try:
        return await DistributionService(db).load_distribution()
    except Exception as e:
        logger.exception(f"Error fetching student distribution: {e}")
        raise _internal_error()


@router.post("", response_model=dict)
async def save_student_distribution(
    board: DistributionBoard,
    db: DbSession,
    user: StaffUser,
) -> dict:
    """Replace the stored distribution with the submitted day buckets."""
    try:
        return await DistributionService(db).save_distribution(
            board, user_name=user.full_name or user.username
        )
    except DistributionValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e))
    except Exception as e:
        logger.exception(f"Error saving student distribution: {e}")
        raise _internal_error()


@router.put("", response_model=dict)
async def auto_allocate_students(
    db: DbSession,
    user: StaffUser,
) -> dict:
    """Randomly allocate every student that has no locked days."""
    try:
        return await DistributionService(db).auto_allocate(
            user_name=user.full_name or user.username
        )
    except Exception as e:
        logger.exception(f"Error auto-allocating students: {e}")
        raise _internal_error()


@router.post("/move", response_model=DistributionBoard)
async def move_student(
    request: MoveRequest,
    user: StaffUser,
) -> DistributionBoard:
    """Apply one drag-and-drop move to the submitted board (nothing is saved)."""
    try:
        return apply_move(
            request.board,
            request.move,
            enforce_plan_quota=settings.enforce_plan_quota_on_move,
        )
    except MoveRejected as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": e.message, "studentId": e.student_id, "day": e.day},
        )
    except InvalidMove as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e))


@router.post("/toggle-lock", response_model=DistributionBoard)
async def toggle_student_lock(
    request: LockToggleRequest,
    user: StaffUser,
) -> DistributionBoard:
    """Lock or unlock a student's days on the submitted board (nothing is saved)."""
    try:
        return toggle_lock(request.board, request.student_id)
    except InvalidMove as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e))


@router.get("/export/excel")
async def export_student_distribution_excel(
    db: DbSession,
    user: StaffUser,
) -> StreamingResponse:
    """Export the stored distribution to Excel."""
    try:
        snapshot = await DistributionService(db).load_distribution()
        output = build_distribution_workbook(snapshot)
    except Exception as e:
        logger.exception(f"Error exporting student distribution: {e}")
        raise _internal_error()

    filename = f"student_distribution_{datetime.now().strftime('%Y-%m-%d')}.xlsx"
    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
