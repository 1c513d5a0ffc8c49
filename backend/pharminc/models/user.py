from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, utcnow
from pharminc.models.specialty import user_specialties


class User(Base):
    """Job-seeker profile. id is the Auth id."""

    __tablename__ = "users"

    id = Column(String(36), ForeignKey("auth.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, nullable=False, index=True)
    location = Column(String, nullable=False)
    specialty = Column(String, nullable=False)  # primary area of expertise
    gender = Column(String, nullable=False)
    role = Column(String, nullable=False, default="DOCTOR")  # 'DOCTOR' | 'NURSE'
    headline = Column(String, nullable=True)
    about = Column(Text, nullable=True)
    verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    auth = relationship("Auth", back_populates="user")
    specialties = relationship(
        "Specialty", secondary=user_specialties, back_populates="users", order_by="Specialty.name"
    )
    applications = relationship(
        "Application", back_populates="user", cascade="all, delete-orphan"
    )
