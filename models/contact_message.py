from sqlalchemy import Column, Integer, String, DateTime, Text, func
from database import Base, utcnow

MESSAGE_STATUSES = ('new', 'read', 'responded')


class ContactMessage(Base):
    __tablename__ = 'contact_messages'

    id = Column(Integer, primary_key=True)
    name = Column(String(256), nullable=False)
    email = Column(String(256), nullable=False)
    subject = Column(String(512), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(String(16), nullable=False, default='new', index=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
