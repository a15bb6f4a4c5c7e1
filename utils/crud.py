"""Small helpers shared by the admin CRUD routes."""
from sqlalchemy.orm import Session

from utils.errors import DependencyFailure, NotFoundError


def get_or_404(db: Session, model, record_id, message: str = "Not found"):
    record = db.query(model).filter(model.id == record_id).first()
    if record is None:
        raise NotFoundError(message)
    return record


def apply_updates(record, changes: dict):
    for field, value in changes.items():
        setattr(record, field, value)
    return record


def commit_or_fail(db: Session, log, action: str, message: str = None):
    """Commit the session; on failure roll back, log, and raise a client-safe error."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        log.exception(f"Database commit failed while trying to {action}.")
        raise DependencyFailure(message or f"Failed to {action}")
