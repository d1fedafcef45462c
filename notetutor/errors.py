"""
Error taxonomy shared by the orchestrators and routes.

Every error carries the HTTP status it maps to and a client-safe message.
`main.py` registers a handler that renders any `NoteTutorError` as
``{"error": <message>}``. Server-side detail goes in ``detail`` and is only
logged, never returned to the client.
"""

from fastapi import status


class NoteTutorError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An internal error occurred."

    def __init__(self, message: str | None = None, *, detail: str | None = None):
        if message is not None:
            self.message = message
        self.detail = detail
        super().__init__(detail or self.message)

    def public_message(self) -> str:
        return self.message


class Unauthenticated(NoteTutorError):
    """Missing or invalid bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized"


class InvalidRequest(NoteTutorError):
    """Missing required fields or unusable input (e.g. a subject with no notes)."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class NotFound(NoteTutorError):
    """Resource does not exist or belongs to another user."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class PayloadTooLarge(NoteTutorError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    message = "Uploaded file is too large"


class UpstreamFailure(NoteTutorError):
    """Store or LLM provider failure. Detail is logged server-side only."""

    message = "An error occurred while processing your request."


class ValidationFailure(NoteTutorError):
    """Generated quiz does not match the expected shape."""

    message = "Failed to generate valid quiz. Please try again."
