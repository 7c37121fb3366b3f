"""Students API endpoints."""

import logging

from fastapi import APIRouter, HTTPException, status

from schoolhub.api.dependencies import DbSession, StaffUser
from schoolhub.services.distribution_board import CamelModel
from schoolhub.services.distribution_service import DistributionService, StudentScheduleDay

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/students", tags=["students"])


class StudentScheduleResponse(CamelModel):
    """Weekly schedule of one student."""

    schedule: list[StudentScheduleDay]


@router.get("/{student_id}/schedule", response_model=StudentScheduleResponse)
async def get_student_schedule(
    student_id: int,
    db: DbSession,
    user: StaffUser,
) -> StudentScheduleResponse:
    """Get the weekdays a student is distributed to."""
    schedule = await DistributionService(db).get_student_schedule(student_id)
    if schedule is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found"
        )
    return StudentScheduleResponse(schedule=schedule)
