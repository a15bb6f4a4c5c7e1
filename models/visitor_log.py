from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base, JSONType, utcnow


class VisitorLog(Base):
    __tablename__ = 'visitor_logs'

    id = Column(Integer, primary_key=True)
    session_id = Column(String(64), nullable=False, index=True)
    page = Column(String(512), nullable=False, index=True)
    page_title = Column(String(512), nullable=True)
    referrer = Column(String(1024), nullable=True)
    user_agent = Column(String(512), nullable=True)
    ip_address = Column(String(64), nullable=True)
    device = Column(JSONType, nullable=True)  # {type, os, browser}
    duration = Column(Integer, nullable=True)  # seconds on page, reported when the visitor leaves
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), index=True)

    # No foreign keys: visit history outlives the pages it points at

    def to_dict(self):
        return {
            'id': self.id,
            'sessionId': self.session_id,
            'page': self.page,
            'pageTitle': self.page_title,
            'referrer': self.referrer,
            'userAgent': self.user_agent,
            'device': self.device or {},
            'duration': self.duration,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
