from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from pharminc.schemas.common import OrmModel, reject_null_fields
from pharminc.schemas.specialty import SpecialtyOut, SpecialtyRef

UserRole = Literal["DOCTOR", "NURSE"]


class UserProfileCreate(BaseModel):
    """Profile fields supplied at signup or on POST /users."""

    name: str = Field(min_length=1)
    location: str
    specialty: str  # primary specialty
    gender: str
    role: UserRole = "DOCTOR"
    headline: Optional[str] = None
    about: Optional[str] = None
    specialties: Optional[list[SpecialtyRef]] = None


class UserUpdate(BaseModel):
    """Partial update; only fields present in the body change."""

    name: Optional[str] = Field(default=None, min_length=1)
    location: Optional[str] = None
    specialty: Optional[str] = None
    gender: Optional[str] = None
    role: Optional[UserRole] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    specialties: Optional[list[SpecialtyRef]] = None

    @model_validator(mode="after")
    def check_required_fields(self):
        return reject_null_fields(self, ("name", "location", "specialty", "gender", "role"))


class UserOut(OrmModel):
    id: str
    name: str
    location: str
    specialty: str
    gender: str
    role: str
    headline: Optional[str] = None
    about: Optional[str] = None
    verified: bool
    created_at: datetime
    specialties: list[SpecialtyOut] = []
