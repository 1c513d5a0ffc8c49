from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, new_id, utcnow
from pharminc.models.specialty import job_specialties


class Job(Base):
    """Job posting owned by one institute."""

    __tablename__ = "jobs"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String, nullable=True)
    job_type = Column(String, nullable=False, index=True)  # Full-time, Part-time, Internship
    work_location = Column(String, nullable=False)
    experience_level = Column(String, nullable=False, index=True)  # Entry, Mid, Senior
    requirements = Column(Text, nullable=False)
    salary_min = Column(Float, nullable=False)
    salary_max = Column(Float, nullable=False)
    salary_currency = Column(String, nullable=True, default="INR")
    status = Column(String, nullable=False, default="active")  # 'active' | 'closed'
    application_deadline = Column(DateTime, nullable=True)
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    contact_person = Column(String, nullable=True)
    additional_info = Column(JSON, nullable=True)

    institute_id = Column(
        String(36), ForeignKey("institutes.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    institute = relationship("Institute", back_populates="jobs")
    specialties = relationship(
        "Specialty", secondary=job_specialties, back_populates="jobs", order_by="Specialty.name"
    )
    applications = relationship("Application", back_populates="job", cascade="all, delete-orphan")
    views = relationship("JobView", back_populates="job", cascade="all, delete-orphan")


class JobView(Base):
    """
    Append-only view log used for engagement counting.

    user_id is NULL for anonymous viewers.
    """

    __tablename__ = "job_views"

    id = Column(Integer, primary_key=True)
    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("auth.id", ondelete="SET NULL"), nullable=True, index=True)
    viewed_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    job = relationship("Job", back_populates="views")
