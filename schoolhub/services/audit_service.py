"""Audit service for logging back-office changes."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


async def log_audit(
    db: AsyncSession,
    action_type: str,  # 'SAVE', 'AUTO_ALLOCATE', 'LOCK', ...
    entity_type: str,  # 'student_distribution', 'student', ...
    entity_id: Optional[int],
    entity_name: str,
    description: str,
    user_name: str = "Administrator",
    user_type: str = "ADMIN",
    changes: Optional[Dict[str, Any]] = None,
) -> Optional[AuditLog]:
    """
    Log an audit event.

    The entry is only added to the session; the calling service commits it
    together with its own changes.

    Args:
        db: Database session
        action_type: Type of action
        entity_type: Type of entity
        entity_id: ID of the entity, if there is one
        entity_name: Name of the entity for quick search
        description: Human-readable description
        user_name: Name of the user who performed the action
        user_type: Role of the user
        changes: Dictionary with details of the change

    Returns:
        Created AuditLog instance or None if failed
    """
    try:
        audit_log = AuditLog(
            timestamp=datetime.now(timezone.utc),
            user_type=user_type,
            user_name=user_name,
            action_type=action_type,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_name=entity_name,
            description=description,
            changes_json=changes,
        )
        db.add(audit_log)

        logger.info(f"Audit log created: {action_type} {entity_type} '{entity_name}' by {user_name}")
        return audit_log

    except Exception as e:
        # Auditing never breaks the parent transaction
        logger.error(f"Failed to create audit log: {e}")
        logger.exception(e)
        return None


async def get_audit_logs(
    db: AsyncSession,
    entity_type: Optional[str] = None,
    limit: int = 50,
) -> list[AuditLog]:
    """Get the newest audit logs, optionally for one entity type."""
    query = select(AuditLog)
    if entity_type:
        query = query.where(AuditLog.entity_type == entity_type)
    result = await db.execute(query.order_by(AuditLog.id.desc()).limit(limit))
    return list(result.scalars().all())
