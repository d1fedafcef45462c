"""Subject schemas."""

from pydantic import Field

from notetutor.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class SubjectCreate(BaseSchema):
    """Schema for creating a subject."""

    title: str = Field(..., min_length=1, max_length=255)


class SubjectRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Schema for reading subject data."""

    user_id: str
    title: str
