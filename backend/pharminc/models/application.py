from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, new_id, utcnow


class Application(Base):
    """A user's application to one job."""

    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("job_id", "user_id", name="uq_application_job_user"),)

    id = Column(String(36), primary_key=True, default=new_id)
    status = Column(String, nullable=False, default="pending")  # 'pending' | 'accepted' | 'rejected'
    applied_date = Column(DateTime, default=utcnow, nullable=False)
    resume_url = Column(String, nullable=False)
    cover_letter = Column(Text, nullable=True)
    experience_years = Column(Float, nullable=True)
    current_position = Column(String, nullable=True)
    current_institute = Column(String, nullable=True)
    additional_details = Column(JSON, nullable=True)

    job_id = Column(String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    job = relationship("Job", back_populates="applications")
    user = relationship("User", back_populates="applications")
