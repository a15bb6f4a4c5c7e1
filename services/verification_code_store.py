"""
Keyed storage for one-time verification codes.

One record per (identifier, purpose) is live at a time: ``put`` deletes the
older ones before inserting, so the latest issued code is the only one that
can ever verify.
"""
import logging
from datetime import timedelta
from typing import Optional

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type, before_sleep_log

from database import utcnow
from models.verification_code import VerificationCode
from utils.errors import DependencyFailure
from utils.logger_factory import new_logger

store_retry_logger = new_logger("verification_store_retry")

# Transient connection drops are retried; anything else surfaces immediately
db_retry = retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    retry=retry_if_exception_type(OperationalError),
    before_sleep=before_sleep_log(store_retry_logger, logging.WARNING),
    reraise=True,
)


def _commit(db: Session, log, action: str):
    try:
        db.commit()
    except OperationalError:
        db.rollback()
        log.exception(f"OperationalError while trying to {action}, will retry.")
        raise
    except Exception:
        db.rollback()
        log.exception(f"Database commit failed while trying to {action}.")
        raise DependencyFailure()


@db_retry
def put(db: Session, identifier: str, purpose: str, code: str, ttl: timedelta, now=None) -> VerificationCode:
    """Store a new code for the pair, superseding any earlier record."""
    log = new_logger("verification_code_put")
    now = now or utcnow()
    superseded = db.query(VerificationCode).filter_by(identifier=identifier, purpose=purpose).delete(
        synchronize_session=False
    )
    record = VerificationCode(
        identifier=identifier,
        purpose=purpose,
        code=code,
        expires_at=now + ttl,
        consumed=False,
        attempts=0,
        created_at=now,
    )
    db.add(record)
    _commit(db, log, "store a verification code")
    db.refresh(record)
    log.info(f"Stored verification code {record.to_dict()} (superseded {superseded})")
    return record


def get(db: Session, identifier: str, purpose: str) -> Optional[VerificationCode]:
    """Most recent record for the pair, consumed or not."""
    return (
        db.query(VerificationCode)
        .filter_by(identifier=identifier, purpose=purpose)
        .order_by(VerificationCode.created_at.desc(), VerificationCode.id.desc())
        .first()
    )


@db_retry
def record_failed_attempt(db: Session, record: VerificationCode) -> int:
    log = new_logger("verification_code_attempt")
    db.query(VerificationCode).filter(VerificationCode.id == record.id).update(
        {VerificationCode.attempts: VerificationCode.attempts + 1}, synchronize_session=False
    )
    _commit(db, log, "count a failed attempt")
    db.refresh(record)
    return record.attempts


@db_retry
def consume(db: Session, record: VerificationCode, now=None) -> bool:
    """Flip ``record`` to consumed. False when another request got there first."""
    log = new_logger("verification_code_consume")
    updated = db.query(VerificationCode).filter(
        VerificationCode.id == record.id,
        VerificationCode.consumed.is_(False),
    ).update(
        {VerificationCode.consumed: True, VerificationCode.consumed_at: now or utcnow()},
        synchronize_session=False,
    )
    _commit(db, log, "consume a verification code")
    db.refresh(record)
    return updated == 1


def mark_consumed(db: Session, identifier: str, purpose: str) -> bool:
    """Consume the latest record for the pair.

    Returns False, without raising, when there is no record or it was already
    consumed. A consumed record is never flipped back.
    """
    record = get(db, identifier, purpose)
    if record is None or record.consumed:
        return False
    return consume(db, record)
