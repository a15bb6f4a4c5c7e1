from typing import Optional

from sqlalchemy.orm import Session

from models.activity_log import ActivityLog
from utils.logger_factory import new_logger


def log_activity(
    db: Session,
    user: dict,
    action: str,
    resource: str,
    resource_id=None,
    details: Optional[dict] = None,
    status: str = "success",
) -> None:
    """Append an audit entry for a back-office action.

    The audit trail never blocks the action it records: a failed write is
    logged and dropped.
    """
    log = new_logger("log_activity")
    entry = ActivityLog(
        user_id=str(user.get("id")),
        user_name=user.get("name"),
        user_email=user.get("email"),
        action=action,
        resource=resource,
        resource_id=str(resource_id) if resource_id is not None else None,
        details=details or {},
        status=status,
    )
    try:
        db.add(entry)
        db.commit()
    except Exception:
        db.rollback()
        log.exception(f"Failed to record {action} on {resource} {resource_id} by {user.get('id')}")
        return
    log.info(f"{user.get('email') or user.get('id')} {action} {resource} {resource_id or ''}".rstrip())


def recent_activity(db: Session, limit: int = 50, user_id: Optional[str] = None, resource: Optional[str] = None):
    query = db.query(ActivityLog)
    if user_id:
        query = query.filter(ActivityLog.user_id == user_id)
    if resource:
        query = query.filter(ActivityLog.resource == resource)
    return query.order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc()).limit(limit).all()
