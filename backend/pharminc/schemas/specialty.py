from typing import Optional

from pydantic import BaseModel, Field

from pharminc.schemas.common import OrmModel


class SpecialtyRef(BaseModel):
    """Reference used when tagging a profile or job; matched by name."""

    id: Optional[str] = None
    name: str = Field(min_length=1)


class SpecialtyCreate(BaseModel):
    name: str = Field(min_length=1)


class SpecialtyOut(OrmModel):
    id: str
    name: str
