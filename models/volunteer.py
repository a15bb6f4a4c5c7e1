from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Index, func
from database import Base, JSONType, utcnow

OPPORTUNITY_TYPES = ('Remote', 'On-site', 'Hybrid')
OPPORTUNITY_STATUSES = ('open', 'closed', 'draft')
QUESTION_TYPES = ('text', 'textarea', 'select', 'checkbox')
APPLICATION_STATUSES = ('pending', 'approved', 'rejected', 'contacted')


class VolunteerOpportunity(Base):
    __tablename__ = 'volunteer_opportunities'

    id = Column(Integer, primary_key=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String(256), nullable=False)
    type = Column(String(16), nullable=False)
    time_commitment = Column(String(256), nullable=False)
    required_skills = Column(JSONType, nullable=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    max_volunteers = Column(Integer, nullable=False, default=0)  # 0 means unlimited
    current_applications = Column(Integer, nullable=False, default=0, server_default='0')
    status = Column(String(16), nullable=False, default='draft', index=True)
    custom_questions = Column(JSONType, nullable=True)  # [{id, title, type, options, required}]
    created_by = Column(JSONType, nullable=True)  # {name, email}
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location': self.location,
            'type': self.type,
            'timeCommitment': self.time_commitment,
            'requiredSkills': self.required_skills or [],
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'maxVolunteers': self.max_volunteers,
            'currentApplications': self.current_applications,
            'status': self.status,
            'customQuestions': self.custom_questions or [],
            'createdBy': self.created_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }


class VolunteerApplication(Base):
    __tablename__ = 'volunteer_applications'
    __table_args__ = (
        Index('idx_volunteer_applications_opportunity_email', 'opportunity_id', 'email'),
    )

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=True)
    opportunity_id = Column(Integer, ForeignKey('volunteer_opportunities.id', ondelete='SET NULL'), nullable=True, index=True)
    opportunity_title = Column(String(256), nullable=True)
    first_name = Column(String(128), nullable=False)
    last_name = Column(String(128), nullable=False)
    email = Column(String(256), nullable=False, index=True)  # stored lowercase
    phone = Column(String(32), nullable=False)
    city = Column(String(128), nullable=False)
    state = Column(String(128), nullable=False)
    country = Column(String(128), nullable=False)
    age = Column(Integer, nullable=False)
    profession = Column(String(128), nullable=False)
    interest_area = Column(String(128), nullable=False, default='Other')
    experience = Column(Text, nullable=False)
    availability = Column(String(256), nullable=False)
    why_volunteer = Column(Text, nullable=False)
    skills = Column(Text, nullable=False)
    custom_answers = Column(JSONType, nullable=True)
    status = Column(String(16), nullable=False, default='pending', index=True)
    status_history = Column(JSONType, nullable=True)  # [{status, changedAt, changedBy, notes}]
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'opportunityId': self.opportunity_id,
            'opportunityTitle': self.opportunity_title,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'email': self.email,
            'phone': self.phone,
            'city': self.city,
            'state': self.state,
            'country': self.country,
            'age': self.age,
            'profession': self.profession,
            'interestArea': self.interest_area,
            'experience': self.experience,
            'availability': self.availability,
            'whyVolunteer': self.why_volunteer,
            'skills': self.skills,
            'customAnswers': self.custom_answers or {},
            'status': self.status,
            'statusHistory': self.status_history or [],
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
