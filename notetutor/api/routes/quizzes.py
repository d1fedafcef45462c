"""Quiz routes: generation, retrieval, and grading."""

from uuid import UUID

from fastapi import APIRouter

from notetutor.api.deps import CurrentUid, QuizServiceDep, Store, found_or_404
from notetutor.errors import InvalidRequest
from notetutor.schemas.quizzes import (
    QuestionResult,
    QuizGenerated,
    QuizGradeRequest,
    QuizGradeResponse,
    QuizQuestion,
    QuizRead,
    QuizRequest,
)

router = APIRouter(tags=["quizzes"])


@router.post("/quiz", response_model=QuizGenerated)
async def generate_quiz(
    uid: CurrentUid,
    request: QuizRequest,
    quiz_service: QuizServiceDep,
) -> QuizGenerated:
    """
    Generate a ten-question quiz from the subject's most recent notes.

    The quiz is stored only if every question is valid.
    """
    if request.subject_id is None:
        raise InvalidRequest("Missing subjectId")

    quiz, questions = await quiz_service.generate(uid, request.subject_id)
    return QuizGenerated(quiz_id=quiz.id, questions=questions)


@router.get("/subjects/{subject_id}/quizzes", response_model=list[QuizRead])
async def list_quizzes(subject_id: UUID, uid: CurrentUid, store: Store) -> list[QuizRead]:
    """List the subject's quizzes, newest first."""
    quizzes = await store.list_quizzes(subject_id, uid)
    return [QuizRead.model_validate(q) for q in quizzes]


@router.get("/quizzes/{quiz_id}", response_model=QuizRead)
async def get_quiz(quiz_id: UUID, uid: CurrentUid, store: Store) -> QuizRead:
    """Get a specific quiz by ID."""
    quiz = found_or_404(await store.get_quiz(quiz_id, uid), "Quiz")
    return QuizRead.model_validate(quiz)


@router.post("/quizzes/{quiz_id}/grade", response_model=QuizGradeResponse)
async def grade_quiz(
    quiz_id: UUID,
    data: QuizGradeRequest,
    uid: CurrentUid,
    store: Store,
) -> QuizGradeResponse:
    """
    Score an attempt. Unanswered questions count as incorrect.

    Attempts are not stored.
    """
    quiz = found_or_404(await store.get_quiz(quiz_id, uid), "Quiz")
    questions = [QuizQuestion.model_validate(q) for q in quiz.questions]

    results = []
    for index, question in enumerate(questions):
        selected = data.answers.get(index)
        results.append(
            QuestionResult(
                index=index,
                selected_index=selected,
                answer_index=question.answer_index,
                correct=selected == question.answer_index,
                explanation=question.explanation,
            )
        )

    return QuizGradeResponse(
        score=sum(1 for r in results if r.correct),
        total=len(questions),
        results=results,
    )
