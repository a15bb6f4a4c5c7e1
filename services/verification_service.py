"""
Issue and check emailed one-time codes for the public submission flows.
"""
import os
import secrets
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from database import utcnow
from models.verification_code import OtpPurpose, PURPOSE_LABELS
from services import notification_service, verification_code_store
from services.notification_service import NotificationError, TemplateKind
from utils.errors import DependencyFailure, ValidationError, VerificationError, VerificationFailure
from utils.logger_factory import new_logger
from utils.validation import require_email

CODE_EXPIRY_MINUTES = 10
CODE_LENGTH = 6
MAX_VERIFY_ATTEMPTS = 5

APP_ENV = os.getenv("APP_ENV", "production")


def generate_code() -> str:
    # 100000-999999, so codes are always six digits
    return str(secrets.randbelow(900000) + 100000)


def parse_purpose(purpose) -> OtpPurpose:
    try:
        return OtpPurpose(purpose)
    except ValueError:
        raise ValidationError("Invalid verification purpose")


def issue_code(db: Session, identifier: str, purpose) -> None:
    """Generate, store and email a fresh code for ``identifier``.

    The code is only ever delivered by email. If delivery fails the stored
    record stays behind and is superseded by the next issue.
    """
    log = new_logger("issue_code")
    email = require_email(identifier)
    purpose = parse_purpose(purpose)

    code = generate_code()
    verification_code_store.put(db, email, purpose.value, code, timedelta(minutes=CODE_EXPIRY_MINUTES))

    if APP_ENV == "development":
        log.info(f"[DEV] verification code for {email} ({purpose.value}): {code}")

    try:
        notification_service.send(email, TemplateKind.VERIFICATION_CODE, {
            "code": code,
            "purpose_label": PURPOSE_LABELS[purpose],
            "expires_in_minutes": CODE_EXPIRY_MINUTES,
        })
    except NotificationError:
        log.error(f"Failed to deliver verification code to {email} ({purpose.value})")
        raise DependencyFailure("Failed to send verification code. Please try again.")
    log.info(f"Verification code issued to {email} for {purpose.value}")


def verify_code(db: Session, identifier: str, purpose, submitted_code: Optional[str], now=None) -> None:
    """Check ``submitted_code`` and consume it.

    Raises VerificationError carrying the specific reason; the reason is
    logged here and never shown to the visitor.
    """
    log = new_logger("verify_code")
    email = require_email(identifier)
    purpose = parse_purpose(purpose)
    submitted = (submitted_code or "").strip()
    now = now or utcnow()

    def fail(reason: VerificationFailure):
        log.warning(f"Verification failed for {email} ({purpose.value}): {reason.value}")
        raise VerificationError(reason)

    record = verification_code_store.get(db, email, purpose.value)
    if record is None:
        fail(VerificationFailure.NOT_FOUND)
    if record.is_expired(now):
        fail(VerificationFailure.EXPIRED)
    if record.consumed:
        fail(VerificationFailure.ALREADY_CONSUMED)
    if record.attempts >= MAX_VERIFY_ATTEMPTS:
        fail(VerificationFailure.TOO_MANY_ATTEMPTS)
    if not secrets.compare_digest(record.code.encode(), submitted.encode()):
        attempts = verification_code_store.record_failed_attempt(db, record)
        log.info(f"Mismatched code for {email} ({purpose.value}), attempt {attempts}/{MAX_VERIFY_ATTEMPTS}")
        fail(VerificationFailure.MISMATCH)
    if not verification_code_store.consume(db, record, now):
        # A concurrent request consumed it between the read and the update
        fail(VerificationFailure.ALREADY_CONSUMED)
    log.info(f"Verification code accepted for {email} ({purpose.value})")
