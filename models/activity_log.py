from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base, JSONType, utcnow


class ActivityLog(Base):
    __tablename__ = 'activity_logs'

    id = Column(Integer, primary_key=True)
    user_id = Column(String(64), nullable=False, index=True)
    user_name = Column(String(256), nullable=True)
    user_email = Column(String(256), nullable=True)
    action = Column(String(64), nullable=False, index=True)
    resource = Column(String(64), nullable=False, index=True)
    resource_id = Column(String(64), nullable=True)
    details = Column(JSONType, nullable=True)
    status = Column(String(16), nullable=False, default='success')  # success | failure | warning
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'userName': self.user_name,
            'userEmail': self.user_email,
            'action': self.action,
            'resource': self.resource,
            'resourceId': self.resource_id,
            'details': self.details or {},
            'status': self.status,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
