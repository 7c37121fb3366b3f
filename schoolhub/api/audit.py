"""Audit log API endpoints."""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict

from schoolhub.api.dependencies import DbSession, StaffUser
from schoolhub.services.audit_service import get_audit_logs

router = APIRouter(prefix="/admin/audit", tags=["audit"])


class AuditLogResponse(BaseModel):
    """Response model for audit log."""

    id: int
    timestamp: datetime
    user_name: str
    action_type: str
    entity_type: str
    entity_id: Optional[int] = None
    entity_name: Optional[str] = None
    description: str
    changes_json: Optional[dict] = None

    model_config = ConfigDict(from_attributes=True)


@router.get("/logs", response_model=List[AuditLogResponse])
async def list_audit_logs(
    db: DbSession,
    user: StaffUser,
    entity_type: Optional[str] = Query(None, description="Filter by entity type"),
    limit: int = Query(50, ge=1, le=200, description="Number of entries"),
):
    """Get the newest audit log entries."""
    return await get_audit_logs(db, entity_type=entity_type, limit=limit)
