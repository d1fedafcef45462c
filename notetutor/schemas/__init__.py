"""Pydantic schemas for API request/response validation."""

from notetutor.schemas.chat import ChatMessageRead, ChatReply, ChatRequest, ChatTranscript
from notetutor.schemas.notes import NoteCreate, NoteExtractResponse, NoteRead
from notetutor.schemas.quizzes import (
    QuestionResult,
    QuizGenerated,
    QuizGradeRequest,
    QuizGradeResponse,
    QuizQuestion,
    QuizRead,
    QuizRequest,
)
from notetutor.schemas.subjects import SubjectCreate, SubjectRead
from notetutor.schemas.user import UserRead

__all__ = [
    # User
    "UserRead",
    # Subjects
    "SubjectCreate",
    "SubjectRead",
    # Notes
    "NoteCreate",
    "NoteRead",
    "NoteExtractResponse",
    # Chat
    "ChatRequest",
    "ChatReply",
    "ChatMessageRead",
    "ChatTranscript",
    # Quizzes
    "QuizQuestion",
    "QuizRequest",
    "QuizGenerated",
    "QuizRead",
    "QuizGradeRequest",
    "QuizGradeResponse",
    "QuestionResult",
]
