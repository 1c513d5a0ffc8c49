from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from pharminc.schemas.common import OrmModel, reject_null_fields, validate_email_format
from pharminc.schemas.specialty import SpecialtyOut, SpecialtyRef

InstituteRole = Literal["HOSPITAL", "CLINIC", "LAB", "PHARMACY"]


class InstituteProfileCreate(BaseModel):
    """Institute fields supplied at signup or on POST /institutes."""

    name: str = Field(min_length=1)
    location: str
    contact_email: str
    contact_number: str
    role: InstituteRole = "HOSPITAL"
    affiliated_university: Optional[str] = None
    year_established: Optional[int] = Field(default=None, ge=1000, le=9999)
    ownership: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    specialties: Optional[list[SpecialtyRef]] = None

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v: str) -> str:
        return validate_email_format(v)


class InstituteUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    contact_email: Optional[str] = None
    contact_number: Optional[str] = None
    role: Optional[InstituteRole] = None
    affiliated_university: Optional[str] = None
    year_established: Optional[int] = Field(default=None, ge=1000, le=9999)
    ownership: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    specialties: Optional[list[SpecialtyRef]] = None

    @field_validator("contact_email")
    @classmethod
    def validate_contact_email(cls, v: Optional[str]) -> Optional[str]:
        return validate_email_format(v)

    @model_validator(mode="after")
    def check_required_fields(self):
        return reject_null_fields(
            self, ("name", "location", "contact_email", "contact_number", "role")
        )


class InstituteOut(OrmModel):
    id: str
    name: str
    location: str
    contact_email: str
    contact_number: str
    role: str
    verified: bool
    affiliated_university: Optional[str] = None
    year_established: Optional[int] = None
    ownership: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    created_at: datetime
    specialties: list[SpecialtyOut] = []
