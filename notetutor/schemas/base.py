"""Base schema configuration.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """camelCase aliases, values kept exactly as given."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseSchema(WireModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class IDMixin(BaseModel):
    """Mixin for UUID primary key."""

    id: UUID


class CreatedAtMixin(BaseModel):
    """Mixin for the creation timestamp."""

    created_at: datetime
