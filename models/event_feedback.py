from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, func
from database import Base, utcnow

FEEDBACK_TYPES = ('rating', 'comment', 'photo')
FEEDBACK_STATUSES = ('pending', 'approved', 'rejected')


class EventFeedback(Base):
    __tablename__ = 'event_feedback'

    id = Column(Integer, primary_key=True)
    event_id = Column(Integer, ForeignKey('events.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(String(64), nullable=True)
    user_name = Column(String(256), nullable=False)
    user_email = Column(String(256), nullable=False)  # stored lowercase
    type = Column(String(16), nullable=False)
    status = Column(String(16), nullable=False, default='pending', index=True)  # only approved feedback is public
    rating = Column(Integer, nullable=True)  # 1-5, rating feedback only
    comment = Column(Text, nullable=True)
    photo_url = Column(String(1024), nullable=True)
    photo_caption = Column(String(512), nullable=True)
    admin_notes = Column(Text, nullable=True)
    reviewed_by = Column(String(256), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'eventId': self.event_id,
            'userId': self.user_id,
            'userName': self.user_name,
            'userEmail': self.user_email,
            'type': self.type,
            'status': self.status,
            'rating': self.rating,
            'comment': self.comment,
            'photoUrl': self.photo_url,
            'photoCaption': self.photo_caption,
            'adminNotes': self.admin_notes,
            'reviewedBy': self.reviewed_by,
            'reviewedAt': self.reviewed_at.isoformat() if self.reviewed_at else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
