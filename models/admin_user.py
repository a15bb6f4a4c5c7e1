from sqlalchemy import Column, Integer, String, DateTime, func
from database import Base, utcnow


class AdminUser(Base):
    """A back-office account. Credentials live with the identity provider."""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True)
    name = Column(String(256), nullable=False)
    email = Column(String(256), nullable=False, unique=True, index=True)  # stored lowercase
    role = Column(String(32), nullable=False)  # admin | content_manager | content_reviewer
    avatar = Column(String(1024), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, default=utcnow, server_default=func.now(), onupdate=utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'avatar': self.avatar,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
        }
