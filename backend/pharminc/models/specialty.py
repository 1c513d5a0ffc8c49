from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import relationship

from pharminc.db.base import Base, new_id

user_specialties = Table(
    "user_specialties",
    Base.metadata,
    Column("user_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)

institute_specialties = Table(
    "institute_specialties",
    Base.metadata,
    Column("institute_id", String(36), ForeignKey("institutes.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)

job_specialties = Table(
    "job_specialties",
    Base.metadata,
    Column("job_id", String(36), ForeignKey("jobs.id", ondelete="CASCADE"), primary_key=True),
    Column("specialty_id", String(36), ForeignKey("specialties.id", ondelete="CASCADE"), primary_key=True),
)


class Specialty(Base):
    """Controlled-vocabulary tag; name is stored lower-cased."""

    __tablename__ = "specialties"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String, unique=True, index=True, nullable=False)

    users = relationship("User", secondary=user_specialties, back_populates="specialties")
    institutes = relationship("Institute", secondary=institute_specialties, back_populates="specialties")
    jobs = relationship("Job", secondary=job_specialties, back_populates="specialties")
