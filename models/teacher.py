from sqlalchemy import Column, Integer, String, DateTime, Text, func
from database import Base, utcnow

TEACHER_APPLICATION_STATUSES = ('pending', 'approved', 'rejected', 'contacted')
ENROLLMENT_STATUSES = ('pending', 'under_review', 'approved', 'rejected', 'enrolled')


class _TeacherCandidateColumns:
    """Applicant fields shared by teacher applications and enrollments."""

    id = Column(Integer, primary_key=True)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(256), nullable=False, index=True)  # stored lowercase
    phone = Column(String(32), nullable=False)
    age = Column(Integer, nullable=False)
    city = Column(String(128), nullable=False)
    state = Column(String(128), nullable=False)
    country = Column(String(128), nullable=False)
    profession = Column(String(128), nullable=False)
    education = Column(String(256), nullable=False)
    meditation_experience = Column(Text, nullable=False)
    teaching_experience = Column(Text, nullable=True)
    why_teach = Column(Text, nullable=False)
    availability = Column(String(256), nullable=False)
    status = Column(String(16), nullable=False, default='pending', index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def _candidate_dict(self):
        return {
            'id': self.id,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'age': self.age,
            'city': self.city,
            'state': self.state,
            'country': self.country,
            'profession': self.profession,
            'education': self.education,
            'meditationExperience': self.meditation_experience,
            'teachingExperience': self.teaching_experience,
            'whyTeach': self.why_teach,
            'availability': self.availability,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


class TeacherApplication(_TeacherCandidateColumns, Base):
    __tablename__ = 'teacher_applications'

    def to_dict(self):
        return self._candidate_dict()


class TeacherEnrollment(_TeacherCandidateColumns, Base):
    __tablename__ = 'teacher_enrollments'

    name = Column(String(256), nullable=False)
    reference_number = Column(String(32), nullable=True)
    reviewer_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(64), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    def to_dict(self):
        data = self._candidate_dict()
        data.update({
            'name': self.name,
            'referenceNumber': self.reference_number,
            'reviewerNotes': self.reviewer_notes,
            'reviewedBy': self.reviewed_by,
            'reviewedAt': self.reviewed_at.isoformat() if self.reviewed_at else None,
        })
        return data
