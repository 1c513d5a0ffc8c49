import re
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")

EMAIL_PATTERN = r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+\.[a-zA-Z0-9-.]+$"
URL_PATTERN = r"^https?://[^\s/$.?#].[^\s]*$"


def validate_email_format(v: Optional[str]) -> Optional[str]:
    """Validate email format and lower-case it."""
    if v is None:
        return v
    if not re.match(EMAIL_PATTERN, v):
        raise ValueError("Invalid email format")
    return v.lower()


def validate_url_format(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not re.match(URL_PATTERN, v):
        raise ValueError("Invalid URL")
    return v


class OrmModel(BaseModel):
    """Base for response schemas read straight from ORM rows."""

    model_config = ConfigDict(from_attributes=True)


class Page(BaseModel, Generic[T]):
    """Paginated list response: {items, page, pageSize, total}."""

    items: list[T]
    page: int
    page_size: int = Field(serialization_alias="pageSize")
    total: int


def reject_null_fields(model: BaseModel, fields: tuple[str, ...]) -> BaseModel:
    """Partial updates may omit a required field but may not null it out."""
    for field in fields:
        if field in model.model_fields_set and getattr(model, field) is None:
            raise ValueError(f"{field} cannot be null")
    return model
