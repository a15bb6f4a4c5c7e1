from sqlalchemy import Column, Integer, String, DateTime, Text, func
from database import Base, utcnow

RESOURCE_TYPES = ('book', 'video', 'magazine', 'link', 'blog', 'testimonial')
RESOURCE_STATUSES = ('draft', 'published')


class Resource(Base):
    __tablename__ = 'resources'

    id = Column(Integer, primary_key=True)
    title = Column(String(256), nullable=False)
    type = Column(String(16), nullable=False, index=True)
    description = Column(Text, nullable=True)
    thumbnail_url = Column(String(1024), nullable=True)
    download_url = Column(String(1024), nullable=True)
    purchase_url = Column(String(1024), nullable=True)
    author = Column(String(256), nullable=True)
    isbn = Column(String(32), nullable=True)
    pages = Column(String(16), nullable=True)
    video_url = Column(String(1024), nullable=True)
    link_url = Column(String(1024), nullable=True)
    content = Column(Text, nullable=True)  # article HTML for blog posts
    quote = Column(Text, nullable=True)
    subtitle = Column(String(256), nullable=True)
    category = Column(String(128), nullable=False, default='general')
    order = Column(Integer, nullable=False, default=0)
    status = Column(String(16), nullable=False, default='published', index=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'type': self.type,
            'description': self.description,
            'thumbnailUrl': self.thumbnail_url,
            'downloadUrl': self.download_url,
            'purchaseUrl': self.purchase_url,
            'author': self.author,
            'isbn': self.isbn,
            'pages': self.pages,
            'videoUrl': self.video_url,
            'linkUrl': self.link_url,
            'content': self.content,
            'quote': self.quote,
            'subtitle': self.subtitle,
            'category': self.category,
            'order': self.order,
            'status': self.status,
            'createdBy': self.created_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }
