from sqlalchemy import Column, Integer, String, DateTime, Boolean, Text, func
from database import Base, JSONType, utcnow

CONTENT_TYPES = (
    'poster', 'testimonial', 'team_member', 'achievement', 'service',
    'photo_collage', 'video_content', 'book_publication', 'mixed_media',
)
CONTENT_STATUSES = ('draft', 'pending_review', 'published', 'archived')
CONTENT_LAYOUTS = ('grid', 'masonry', 'slider')


class Content(Base):
    __tablename__ = 'content'

    id = Column(Integer, primary_key=True)
    title = Column(String(256), nullable=False)
    type = Column(String(32), nullable=False, index=True)
    status = Column(String(16), nullable=False, default='draft', index=True)
    content = Column(JSONType, nullable=False, default=dict)  # type specific payload
    created_by = Column(String(64), nullable=False)
    reviewed_by = Column(String(64), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    published_at = Column(DateTime, nullable=True)
    thumbnail_url = Column(String(1024), nullable=True)
    layout = Column(String(16), nullable=True)
    media_order = Column(JSONType, nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False, server_default='0')
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'status': self.status,
            'content': self.content or {},
            'createdBy': self.created_by,
            'reviewedBy': self.reviewed_by,
            'rejectionReason': self.rejection_reason,
            'publishedAt': self.published_at.isoformat() if self.published_at else None,
            'thumbnailUrl': self.thumbnail_url,
            'layout': self.layout,
            'mediaOrder': self.media_order or [],
            'isFeatured': self.is_featured,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
