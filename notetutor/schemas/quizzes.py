"""Quiz schemas."""

from uuid import UUID

from pydantic import Field

from notetutor.schemas.base import BaseSchema, CreatedAtMixin, IDMixin, WireModel


class QuizQuestion(WireModel):
    """One multiple-choice question; wire shape {q, options, answerIndex, explanation}."""

    q: str
    options: list[str]
    answer_index: int
    explanation: str


# Request schemas
class QuizRequest(BaseSchema):
    """Request to generate a quiz for a subject."""

    subject_id: UUID | None = None


class QuizGradeRequest(BaseSchema):
    """Selected option index per question index. Unanswered questions are omitted."""

    answers: dict[int, int] = Field(default_factory=dict)


# Response schemas
class QuizGenerated(BaseSchema):
    """Newly generated quiz."""

    quiz_id: UUID
    questions: list[QuizQuestion]


class QuizRead(BaseSchema, IDMixin, CreatedAtMixin):
    """Stored quiz."""

    user_id: str
    subject_id: UUID
    title: str
    questions: list[QuizQuestion]


class QuestionResult(BaseSchema):
    index: int
    selected_index: int | None
    answer_index: int
    correct: bool
    explanation: str


class QuizGradeResponse(BaseSchema):
    """Score of a submitted attempt. Nothing is persisted."""

    score: int
    total: int
    results: list[QuestionResult]
