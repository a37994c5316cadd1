from __future__ import annotations

from typing import Optional

from app.constants import (
    MSG_FORMAT,
    MSG_PARSE,
    MSG_QUESTION_FORMAT,
    MSG_TRANSPORT,
)


class QuizGenerationError(Exception):
    """
    Base for every failure of a generation cycle.
    str(err) is the message shown to the user.
    """

    default_message = MSG_TRANSPORT

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class TransportError(QuizGenerationError):
    """The generation request itself failed (network, auth, HTTP status)."""

    default_message = MSG_TRANSPORT

    def __init__(self, message: Optional[str] = None, *, detail: str = ""):
        super().__init__(message)
        self.detail = detail


class ParseError(QuizGenerationError):
    default_message = MSG_PARSE


class FormatError(QuizGenerationError):
    default_message = MSG_FORMAT


class QuestionFormatError(QuizGenerationError):
    default_message = MSG_QUESTION_FORMAT

    def __init__(self, message: Optional[str] = None, *, index: int = -1):
        super().__init__(message)
        self.index = index


class QuizStateError(RuntimeError):
    """An event arrived in a phase that does not accept it."""
