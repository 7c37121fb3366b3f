"""Database models for the SchoolHub back office."""

from schoolhub.models.audit_log import AuditLog
from schoolhub.models.membership_plan import MembershipPlan
from schoolhub.models.student import Student
from schoolhub.models.student_schedule import WEEKDAYS, DayOfWeek, StudentSchedule

__all__ = [
    "AuditLog",
    "DayOfWeek",
    "MembershipPlan",
    "Student",
    "StudentSchedule",
    "WEEKDAYS",
]
