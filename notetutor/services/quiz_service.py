"""Quiz generation from a subject's notes."""

import logging
from datetime import date
from uuid import UUID

from notetutor.config import Settings
from notetutor.db.models import Quiz
from notetutor.db.store import ContentStore
from notetutor.errors import InvalidRequest, NoteTutorError, UpstreamFailure, ValidationFailure
from notetutor.schemas.quizzes import QuizQuestion
from notetutor.services.context import QUIZ_NOTE_SEPARATOR, ContextAssembler, render_notes
from notetutor.services.llm import CompletionClient
from notetutor.services.quiz_parser import (
    QUIZ_LENGTH,
    ParseFailure,
    QuizValidationError,
    extract_json_array,
    validate_questions,
)

logger = logging.getLogger(__name__)

NO_NOTES_MESSAGE = "No notes found. Please create some notes first."

QUIZ_SYSTEM_PROMPT = f"""You are a quiz generator. Generate exactly {QUIZ_LENGTH} multiple-choice questions based on the provided study notes.

Each question should have:
- A clear question (q)
- Exactly 4 answer options (options array)
- The correct answer index (answerIndex: 0-3)
- A brief explanation (explanation)

Format your response as a valid JSON array of questions. Each question should follow this structure:
{{
  "q": "Question text?",
  "options": ["Option A", "Option B", "Option C", "Option D"],
  "answerIndex": 0,
  "explanation": "Brief explanation of why this is correct"
}}

Return ONLY the JSON array, no other text."""


def quiz_title(day: date) -> str:
    """Title a quiz with its creation date, e.g. "Quiz - 3/7/2026"."""
    return f"Quiz - {day.month}/{day.day}/{day.year}"


class QuizService:
    """Generates, validates and stores a ten-question quiz. All or nothing."""

    def __init__(self, store: ContentStore, completion_client: CompletionClient, settings: Settings):
        self.store = store
        self.context = ContextAssembler(store)
        self.completion_client = completion_client
        self.settings = settings

    async def generate(self, user_id: str, subject_id: UUID) -> tuple[Quiz, list[QuizQuestion]]:
        """
        Generate a quiz for the subject.

        Raises:
            InvalidRequest: the subject has no notes for this user.
            ValidationFailure: the completion could not be parsed or validated.
            UpstreamFailure: store or provider error.
        """
        try:
            notes = await self.context.latest_notes(subject_id, user_id, self.settings.quiz_note_count)
            if not notes:
                raise InvalidRequest(NO_NOTES_MESSAGE)

            notes_context = render_notes(notes, separator=QUIZ_NOTE_SEPARATOR)
            raw = await self.completion_client.complete(
                [
                    {"role": "system", "content": QUIZ_SYSTEM_PROMPT},
                    {"role": "user", "content": f"Generate a quiz based on these notes:\n\n{notes_context}"},
                ],
                max_tokens=self.settings.quiz_max_tokens,
                temperature=self.settings.llm_temperature,
            )

            payload = extract_json_array(raw)
            if isinstance(payload, ParseFailure):
                logger.error("Quiz parsing error: %s\nCompletion: %s", payload.reason, raw)
                raise ValidationFailure(detail=payload.reason)

            questions = validate_questions(payload)
            if isinstance(questions, QuizValidationError):
                logger.error("Quiz validation error: %s\nCompletion: %s", questions, raw)
                raise ValidationFailure(detail=str(questions))

            quiz = await self.store.create_quiz(
                user_id,
                subject_id,
                quiz_title(date.today()),
                [question.model_dump(by_alias=True) for question in questions],
            )
            logger.info("Created quiz %s for subject %s", quiz.id, subject_id)
            return quiz, questions

        except NoteTutorError:
            raise
        except Exception as e:
            logger.exception("Quiz generation failed for subject %s", subject_id)
            raise UpstreamFailure(detail=f"{type(e).__name__}: {e}") from e
