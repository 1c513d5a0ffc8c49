from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, new_id, utcnow


class Auth(Base):
    """Credentials and role, kept apart from profile data."""

    __tablename__ = "auth"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash
    role = Column(String, nullable=False, default="USER")  # 'USER' | 'INSTITUTE'
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Exactly one of these is populated, sharing this id
    user = relationship("User", back_populates="auth", uselist=False)
    institute = relationship("Institute", back_populates="auth", uselist=False)
