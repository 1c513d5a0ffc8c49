from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, utcnow
from pharminc.models.specialty import institute_specialties


class Institute(Base):
    """Hiring organisation profile. id is the Auth id."""

    __tablename__ = "institutes"

    id = Column(String(36), ForeignKey("auth.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String, unique=True, index=True, nullable=False)
    location = Column(String, nullable=False)
    contact_email = Column(String, nullable=False)
    contact_number = Column(String, nullable=False)
    role = Column(String, nullable=False, default="HOSPITAL")  # 'HOSPITAL' | 'CLINIC' | 'LAB' | 'PHARMACY'
    verified = Column(Boolean, nullable=False, default=False)
    affiliated_university = Column(String, nullable=True)
    year_established = Column(Integer, nullable=True)
    ownership = Column(String, nullable=True)  # private, government, ...
    headline = Column(String, nullable=True)
    about = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    auth = relationship("Auth", back_populates="institute")
    specialties = relationship(
        "Specialty", secondary=institute_specialties, back_populates="institutes", order_by="Specialty.name"
    )
    jobs = relationship("Job", back_populates="institute", cascade="all, delete-orphan")
