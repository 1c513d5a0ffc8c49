from typing import Any, Literal, Union

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from pharminc.schemas.common import validate_email_format
from pharminc.schemas.institute import InstituteProfileCreate
from pharminc.schemas.user import UserProfileCreate

AuthRole = Literal["USER", "INSTITUTE"]


class Identity(BaseModel):
    """Caller identity decoded from a bearer token."""

    id: str
    role: str


class SignupRequest(BaseModel):
    """
    Schema for account registration.

    profile holds the user fields for role USER and the institute
    fields for role INSTITUTE.
    """

    email: str
    password: str = Field(min_length=6)
    role: AuthRole = "USER"
    profile: Union[UserProfileCreate, InstituteProfileCreate]

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return validate_email_format(v)

    @field_validator("profile", mode="before")
    @classmethod
    def validate_profile(cls, v: Any, info: ValidationInfo):
        role = info.data.get("role")
        if role is None:
            raise ValueError("role is invalid")
        schema = InstituteProfileCreate if role == "INSTITUTE" else UserProfileCreate
        if isinstance(v, schema):
            return v
        if not isinstance(v, dict):
            raise ValueError("profile must be an object")
        try:
            return schema.model_validate(v)
        except ValueError as exc:
            raise ValueError(f"invalid {role.lower()} profile: {exc}") from exc


class SigninRequest(BaseModel):
    """Schema for signin credentials."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return validate_email_format(v)


class Token(BaseModel):
    """Schema for JWT token response."""

    access_token: str
    token_type: str = "bearer"
