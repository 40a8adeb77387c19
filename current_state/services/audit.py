"""Audit logging service: records account and data-changing actions per user."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from current_state.models.audit_log import AuditLog


async def log_action(
    db: AsyncSession,
    *,
    user_id: UUID | None,
    action: str,
    entity_type: str,
    entity_id: str | None = None,
    details: dict | None = None,
):
    """Write an audit log entry. Fire-and-forget, never raises."""
    try:
        entry = AuditLog(
            user_id=user_id,
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            details=details,
        )
        db.add(entry)
    except Exception:
        pass
