"""
Quiz extraction and validation for LLM completions.

Both steps are pure and never raise: they return either the parsed value
or a small error value (`ParseFailure`, `QuizValidationError`) that the
quiz service turns into a single generic client error.
"""

import json
from dataclasses import dataclass
from typing import Any

from notetutor.schemas.quizzes import QuizQuestion

QUIZ_LENGTH = 10
OPTION_COUNT = 4


@dataclass(frozen=True)
class ParseFailure:
    reason: str


@dataclass(frozen=True)
class QuizValidationError:
    reason: str
    index: int | None = None

    def __str__(self) -> str:
        if self.index is None:
            return self.reason
        return f"question {self.index}: {self.reason}"


def _loads(text: str) -> Any | ParseFailure:
    try:
        return json.loads(text)
    except ValueError as e:
        return ParseFailure(str(e))


def extract_json_array(text: str) -> Any | ParseFailure:
    """
    Pull the JSON payload out of a completion.

    1. Strict parse of the whole text; accepted if it is an array.
    2. Otherwise the span from the first "[" to the last "]", which drops
       prose and code fences around the array.
    """
    whole = _loads(text.strip())
    if isinstance(whole, list):
        return whole

    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end <= start:
        if isinstance(whole, ParseFailure):
            return ParseFailure(f"no JSON array found ({whole.reason})")
        return whole

    span = _loads(text[start : end + 1])
    if isinstance(span, ParseFailure):
        return ParseFailure(f"bracketed span is not valid JSON ({span.reason})")
    return span


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _answer_index(value: Any) -> int | None:
    # bool is an int subclass; true/false are not indexes
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, int):
        return None
    if not 0 <= value < OPTION_COUNT:
        return None
    return value


def _check_question(item: Any) -> str | None:
    if not isinstance(item, dict):
        return "not an object"
    if not _non_empty_str(item.get("q")):
        return "missing question text"
    options = item.get("options")
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        return f"options must be a list of exactly {OPTION_COUNT} entries"
    if not all(isinstance(option, str) for option in options):
        return "options must be strings"
    if _answer_index(item.get("answerIndex")) is None:
        return f"answerIndex must be an integer in [0, {OPTION_COUNT - 1}]"
    if not _non_empty_str(item.get("explanation")):
        return "missing explanation"
    return None


def validate_questions(candidate: Any) -> list[QuizQuestion] | QuizValidationError:
    """
    Validate a parsed payload into exactly QUIZ_LENGTH questions.

    Extra questions beyond the first QUIZ_LENGTH are dropped. The first
    invalid question rejects the whole batch.
    """
    if not isinstance(candidate, list):
        return QuizValidationError("payload is not a JSON array")

    items = candidate[:QUIZ_LENGTH]
    if len(items) != QUIZ_LENGTH:
        return QuizValidationError(f"expected {QUIZ_LENGTH} questions, got {len(items)}")

    questions: list[QuizQuestion] = []
    for index, item in enumerate(items):
        problem = _check_question(item)
        if problem is not None:
            return QuizValidationError(problem, index)
        questions.append(
            QuizQuestion(
                q=item["q"],
                options=list(item["options"]),
                answer_index=_answer_index(item["answerIndex"]),
                explanation=item["explanation"],
            )
        )
    return questions
