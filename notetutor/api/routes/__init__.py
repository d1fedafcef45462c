"""API routes package."""

from notetutor.api.routes import (
    auth,
    chat,
    notes,
    quizzes,
    subjects,
)

__all__ = [
    "auth",
    "chat",
    "notes",
    "quizzes",
    "subjects",
]
