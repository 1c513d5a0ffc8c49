from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pharminc.schemas.common import OrmModel, reject_null_fields, validate_url_format
from pharminc.schemas.job import JobBrief
from pharminc.schemas.user import UserOut

ApplicationStatus = Literal["pending", "accepted", "rejected"]


class ApplicationCreate(BaseModel):
    """Schema for applying to a job. The applicant comes from the token."""

    job_id: str
    resume_url: str
    applied_date: Optional[datetime] = None
    cover_letter: Optional[str] = None
    experience_years: Optional[float] = Field(default=None, ge=0)
    current_position: Optional[str] = None
    current_institute: Optional[str] = None
    additional_details: Optional[Any] = None

    @field_validator("resume_url")
    @classmethod
    def validate_resume_url(cls, v: str) -> str:
        return validate_url_format(v)


class ApplicationUpdate(BaseModel):
    """Applicant-side edit. Status is not editable here."""

    resume_url: Optional[str] = None
    cover_letter: Optional[str] = None
    experience_years: Optional[float] = Field(default=None, ge=0)
    current_position: Optional[str] = None
    current_institute: Optional[str] = None
    additional_details: Optional[Any] = None

    @field_validator("resume_url")
    @classmethod
    def validate_resume_url(cls, v: Optional[str]) -> Optional[str]:
        return validate_url_format(v)

    @model_validator(mode="after")
    def check_required_fields(self):
        return reject_null_fields(self, ("resume_url",))


class ApplicationStatusUpdate(BaseModel):
    """Institute-side decision on an application."""

    status: ApplicationStatus


class ApplicationOut(OrmModel):
    id: str
    status: str
    applied_date: datetime
    resume_url: str
    cover_letter: Optional[str] = None
    experience_years: Optional[float] = None
    current_position: Optional[str] = None
    current_institute: Optional[str] = None
    additional_details: Optional[Any] = None
    job_id: str
    user_id: str
    created_at: datetime
    updated_at: datetime
    job: Optional[JobBrief] = None
    user: Optional[UserOut] = None
