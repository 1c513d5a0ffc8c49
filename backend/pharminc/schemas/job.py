from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pharminc.schemas.common import OrmModel, reject_null_fields, validate_email_format
from pharminc.schemas.institute import InstituteOut
from pharminc.schemas.specialty import SpecialtyOut, SpecialtyRef

JobStatus = Literal["active", "closed"]


class JobCreate(BaseModel):
    """Schema for posting a job. The owning institute comes from the token."""

    title: str = Field(min_length=1)
    description: str
    short_description: Optional[str] = None
    job_type: str
    work_location: str
    experience_level: str
    requirements: str
    salary_min: float = Field(ge=0)
    salary_max: float = Field(ge=0)
    salary_currency: Optional[str] = "INR"
    application_deadline: Optional[datetime] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_person: Optional[str] = None
    additional_info: Optional[Any] = None
    specialties: Optional[list[SpecialtyRef]] = None

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email_format(v)

    @model_validator(mode="after")
    def check_salary_range(self):
        if self.salary_max < self.salary_min:
            raise ValueError("salary_max must be >= salary_min")
        return self


class JobUpdate(BaseModel):
    """Partial job update. status may be used to close a posting."""

    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    short_description: Optional[str] = None
    job_type: Optional[str] = None
    work_location: Optional[str] = None
    experience_level: Optional[str] = None
    requirements: Optional[str] = None
    salary_min: Optional[float] = Field(default=None, ge=0)
    salary_max: Optional[float] = Field(default=None, ge=0)
    salary_currency: Optional[str] = None
    status: Optional[JobStatus] = None
    application_deadline: Optional[datetime] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_person: Optional[str] = None
    additional_info: Optional[Any] = None
    specialties: Optional[list[SpecialtyRef]] = None

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email_format(v)

    @model_validator(mode="after")
    def check_fields(self):
        reject_null_fields(
            self,
            (
                "title", "description", "job_type", "work_location", "experience_level",
                "requirements", "salary_min", "salary_max", "status",
            ),
        )
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_max < self.salary_min
        ):
            raise ValueError("salary_max must be >= salary_min")
        return self


class JobBrief(OrmModel):
    id: str
    title: str
    status: str
    institute_id: str


class JobOut(OrmModel):
    id: str
    title: str
    description: str
    short_description: Optional[str] = None
    job_type: str
    work_location: str
    experience_level: str
    requirements: str
    salary_min: float
    salary_max: float
    salary_currency: Optional[str] = None
    status: str
    application_deadline: Optional[datetime] = None
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    contact_person: Optional[str] = None
    additional_info: Optional[Any] = None
    institute_id: str
    created_at: datetime
    updated_at: datetime
    institute: InstituteOut
    specialties: list[SpecialtyOut] = []
