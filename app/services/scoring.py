from dataclasses import dataclass
from typing import List, Optional

from app.models.quiz import QuizSession


@dataclass(frozen=True)
class ReviewItem:
    number: int
    question: str
    your_answer: Optional[str]
    correct_answer: str
    is_correct: bool


def calculate_score(session: QuizSession) -> int:
    """Number of questions whose recorded answer matches the correct option."""
    score = 0
    for i, q in enumerate(session.questions):
        if session.selected_answers.get(i) == q.correct_option_index:
            score += 1
    return score


def build_review(session: QuizSession) -> List[ReviewItem]:
    items: List[ReviewItem] = []
    for i, q in enumerate(session.questions):
        picked = session.selected_answers.get(i)
        your = q.options[picked] if picked is not None and 0 <= picked < len(q.options) else None
        items.append(
            ReviewItem(
                number=i + 1,
                question=q.text,
                your_answer=your,
                correct_answer=q.correct_option,
                is_correct=picked == q.correct_option_index,
            )
        )
    return items
