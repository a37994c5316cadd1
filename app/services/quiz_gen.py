from __future__ import annotations

import json
import logging
from typing import Any, List

from app.constants import OPTION_COUNT, QUESTION_COUNT
from app.errors import (
    FormatError,
    ParseError,
    QuestionFormatError,
    QuizGenerationError,
    TransportError,
)
from app.models.quiz import Question
from app.prompts.news_quiz import build_news_quiz_prompt, news_quiz_system_prompt
from app.utils.text import strip_json_fences

log = logging.getLogger("NewsQuiz")

TEMPERATURE = 0.7
MAX_TOKENS = 2000
RAW_LOG_MAX = 1200


# -----------------------------
# Validation
# -----------------------------
def _is_int(v: Any) -> bool:
    # bool is an int subclass; JSON true/false is not an index
    return isinstance(v, int) and not isinstance(v, bool)


def _validate_item(item: Any, index: int) -> Question:
    if not isinstance(item, dict):
        raise QuestionFormatError(index=index)

    text = item.get("question")
    if not isinstance(text, str) or not text.strip():
        raise QuestionFormatError(index=index)

    options = item.get("options")
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        raise QuestionFormatError(index=index)
    if not all(isinstance(o, str) for o in options):
        raise QuestionFormatError(index=index)

    answer = item.get("correctAnswer")
    if not _is_int(answer) or answer < 0 or answer >= OPTION_COUNT:
        raise QuestionFormatError(index=index)

    return Question(text=text, options=tuple(options), correct_option_index=answer)


def parse_quiz_response(raw: str) -> List[Question]:
    """
    Turn raw model text into exactly QUESTION_COUNT questions.

    All or nothing: the first invalid element aborts the batch.
    Unknown fields on the raw objects are dropped.
    """
    stripped = strip_json_fences(raw)

    try:
        data = json.loads(stripped)
    except (ValueError, RecursionError, TypeError) as e:
        # JSONDecodeError is a ValueError; deep nesting overflows the decoder
        raise ParseError() from e

    if not isinstance(data, list) or len(data) != QUESTION_COUNT:
        raise FormatError()

    return [_validate_item(item, i) for i, item in enumerate(data)]


# -----------------------------
# Generation cycle
# -----------------------------
async def generate_news_quiz(llm) -> List[Question]:
    prompt = build_news_quiz_prompt()

    try:
        raw = await llm.generate(
            prompt,
            system=news_quiz_system_prompt(),
            max_tokens=MAX_TOKENS,
            temperature=TEMPERATURE,
        )
    except QuizGenerationError:
        raise
    except Exception as e:
        log.exception("Generation client failed")
        raise TransportError(detail=str(e)) from e

    try:
        questions = parse_quiz_response(raw or "")
    except QuestionFormatError as e:
        log.warning("Quiz validation failed at element %d: %s", e.index, e)
        log.warning("RAW (first %d): %r", RAW_LOG_MAX, (raw or "")[:RAW_LOG_MAX])
        raise
    except QuizGenerationError as e:
        log.warning("Quiz validation failed: %s", e)
        log.warning("RAW (first %d): %r", RAW_LOG_MAX, (raw or "")[:RAW_LOG_MAX])
        raise

    log.info("Quiz generated | questions=%d", len(questions))
    return questions
