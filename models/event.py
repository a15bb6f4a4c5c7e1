from sqlalchemy import Column, Integer, String, DateTime, Float, Text, func
from database import Base, JSONType, utcnow

EVENT_TYPES = ('beginner_online', 'beginner_physical', 'advanced_online', 'advanced_physical', 'conference')
EVENT_STATUSES = ('draft', 'upcoming', 'ongoing', 'completed', 'cancelled', 'published')
# Registration is only accepted while an event is in one of these states
REGISTRATION_OPEN_STATUSES = ('upcoming', 'ongoing')


class Event(Base):
    __tablename__ = 'events'

    id = Column(Integer, primary_key=True)
    title = Column(String(256), nullable=False)
    description = Column(Text, nullable=False, default='')
    type = Column(String(32), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False, index=True)
    end_date = Column(DateTime, nullable=False)
    timings = Column(String(256), nullable=False, default='')
    image_url = Column(String(1024), nullable=True)
    registration_link = Column(String(1024), nullable=True)
    max_participants = Column(Integer, nullable=True)  # None means unlimited
    current_registrations = Column(Integer, nullable=False, default=0, server_default='0')
    status = Column(String(16), nullable=False, default='draft', index=True)
    location = Column(JSONType, nullable=True)  # {online, address, city, state, country, venue, latitude, longitude}
    benefits = Column(JSONType, nullable=True)
    requirements = Column(JSONType, nullable=True)
    what_to_bring = Column(JSONType, nullable=True)
    gallery_images = Column(JSONType, nullable=True)
    date_slots = Column(JSONType, nullable=True)  # [{date, startTime, endTime, title}]
    teacher_id = Column(String(64), nullable=True)
    teacher_name = Column(String(256), nullable=True)
    target_audience = Column(String(512), nullable=True)
    curriculum = Column(Text, nullable=True)
    price = Column(Float, nullable=False, default=0)
    currency = Column(String(8), nullable=False, default='INR')
    created_by = Column(String(64), nullable=True)  # admin user id
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def is_open_for_registration(self) -> bool:
        return self.status in REGISTRATION_OPEN_STATUSES

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'type': self.type,
            'startDate': self.start_date.isoformat() if self.start_date else None,
            'endDate': self.end_date.isoformat() if self.end_date else None,
            'timings': self.timings,
            'imageUrl': self.image_url,
            'registrationLink': self.registration_link,
            'maxParticipants': self.max_participants,
            'currentRegistrations': self.current_registrations,
            'status': self.status,
            'location': self.location or {'online': True},
            'benefits': self.benefits or [],
            'requirements': self.requirements or [],
            'whatToBring': self.what_to_bring or [],
            'galleryImages': self.gallery_images or [],
            'dateSlots': self.date_slots or [],
            'teacherId': self.teacher_id,
            'teacherName': self.teacher_name,
            'targetAudience': self.target_audience,
            'curriculum': self.curriculum,
            'price': self.price,
            'currency': self.currency,
            'createdBy': self.created_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
