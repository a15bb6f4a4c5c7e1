from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base, utcnow


class Subscriber(Base):
    __tablename__ = 'subscribers'

    id = Column(Integer, primary_key=True)
    email = Column(String(256), nullable=False, unique=True, index=True)  # stored lowercase
    status = Column(String(16), nullable=False, default='active')  # active | unsubscribed
    subscribed_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())

    def to_dict(self):
        return {
            'id': self.id,
            'email': self.email,
            'status': self.status,
            'subscribedAt': self.subscribed_at.isoformat() if self.subscribed_at else None,
        }
