"""Errors raised by the student distribution services."""

from typing import Optional


class DistributionError(Exception):
    """Base error for student distribution operations."""


class DistributionValidationError(DistributionError):
    """Submitted distribution is inconsistent (duplicate day, unknown student)."""


class InvalidMove(DistributionError):
    """Move refers to a bucket or index that does not exist."""


class MoveRejected(DistributionError):
    """Move would break a scheduling rule; the board is left unchanged."""

    def __init__(self, message: str, student_id: int, day: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.student_id = student_id
        self.day = day
