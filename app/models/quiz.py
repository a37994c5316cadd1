from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from app.constants import OPTION_COUNT


@dataclass(frozen=True)
class Question:
    text: str
    options: Tuple[str, ...]
    correct_option_index: int

    def __post_init__(self):
        if len(self.options) != OPTION_COUNT:
            raise ValueError(f"Question must have exactly {OPTION_COUNT} options")
        if not (0 <= self.correct_option_index < OPTION_COUNT):
            raise ValueError("correct_option_index out of range")

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_option_index]


@dataclass
class QuizSession:
    """
    Progress through one batch. Replaced as a whole on retry / new quiz,
    never reused.
    """

    questions: Tuple[Question, ...] = ()
    selected_answers: Dict[int, int] = field(default_factory=dict)
    current_index: int = 0
    complete: bool = False

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_last(self) -> bool:
        return self.current_index >= self.total - 1

    @property
    def current_question(self) -> Optional[Question]:
        if 0 <= self.current_index < self.total:
            return self.questions[self.current_index]
        return None

    def selected_for_current(self) -> Optional[int]:
        return self.selected_answers.get(self.current_index)
