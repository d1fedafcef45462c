"""Note schemas."""

from uuid import UUID

from pydantic import Field

from notetutor.schemas.base import BaseSchema, CreatedAtMixin, IDMixin


class NoteCreate(BaseSchema):
    """Schema for creating a note. Content must be non-empty after trimming."""

    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class NoteRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Schema for reading note data."""

    user_id: str
    subject_id: UUID
    title: str
    content: str


class NoteExtractResponse(BaseSchema):
    """Title and content extracted from an uploaded file, for prefilling a note."""

    title: str
    content: str
