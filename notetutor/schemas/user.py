"""User schemas."""

from notetutor.schemas.base import BaseSchema


class UserRead(BaseSchema):
    """Verified identity of the caller."""

    uid: str
