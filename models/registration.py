from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, func
from database import Base, utcnow

REGISTRATION_STATUSES = ('pending', 'confirmed', 'cancelled')
PAYMENT_STATUSES = ('pending', 'completed', 'free')


class Registration(Base):
    __tablename__ = 'registrations'
    __table_args__ = (
        Index('idx_registrations_event_email', 'event_id', 'email'),
    )

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    name = Column(String(256), nullable=False)
    email = Column(String(256), nullable=False)  # stored lowercase
    phone = Column(String(32), nullable=False)
    city = Column(String(128), nullable=True)
    profession = Column(String(128), nullable=True)
    status = Column(String(16), nullable=False, default='confirmed')
    payment_status = Column(String(16), nullable=False, default='free')
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'city': self.city,
            'profession': self.profession,
            'status': self.status,
            'paymentStatus': self.payment_status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
