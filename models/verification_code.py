from enum import Enum
from sqlalchemy import Column, Integer, String, DateTime, Boolean, Index, func
from database import Base, utcnow


class OtpPurpose(str, Enum):
    EVENT_REGISTRATION = "event_registration"
    TEACHER_APPLICATION = "teacher_application"
    TEACHER_ENROLLMENT = "teacher_enrollment"
    VOLUNTEER_APPLICATION = "volunteer_application"


PURPOSE_LABELS = {
    OtpPurpose.EVENT_REGISTRATION: "Event Registration",
    OtpPurpose.TEACHER_APPLICATION: "Teacher Application",
    OtpPurpose.TEACHER_ENROLLMENT: "Teacher Enrollment",
    OtpPurpose.VOLUNTEER_APPLICATION: "Volunteer Application",
}


class VerificationCode(Base):
    __tablename__ = "verification_codes"
    __table_args__ = (
        Index("idx_verification_codes_identifier_purpose", "identifier", "purpose", "created_at"),
    )

    id = Column(Integer, primary_key=True)
    identifier = Column(String(256), nullable=False)  # normalized lowercase email
    purpose = Column(String(32), nullable=False)
    code = Column(String(6), nullable=False)
    expires_at = Column(DateTime, nullable=False)
    consumed = Column(Boolean, nullable=False, default=False, server_default='0')
    consumed_at = Column(DateTime, nullable=True)
    attempts = Column(Integer, nullable=False, default=0, server_default='0')
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())

    def is_expired(self, now=None) -> bool:
        return (now or utcnow()) > self.expires_at

    def to_dict(self):
        # The code itself is deliberately left out so it never reaches a log line
        return {
            'id': self.id,
            'identifier': self.identifier,
            'purpose': self.purpose,
            'expires_at': self.expires_at.isoformat() if self.expires_at else None,
            'consumed': self.consumed,
            'attempts': self.attempts,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
