from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Set, Tuple

from app.constants import MSG_TRANSPORT, OPTION_COUNT
from app.errors import QuizGenerationError, QuizStateError
from app.models.quiz import Question, QuizSession
from app.services.quiz_gen import generate_news_quiz
from app.services.scoring import ReviewItem, build_review, calculate_score

log = logging.getLogger("NewsQuiz")

DEFAULT_ADVANCE_DELAY = 0.5


class Phase(str, Enum):
    LOADING = "loading"
    ANSWERING = "answering"
    ADVANCING = "advancing"
    COMPLETE = "complete"
    ERROR = "error"


@dataclass(frozen=True)
class QuizSnapshot:
    phase: Phase
    message: str = ""
    question: Optional[Question] = None
    index: int = 0
    total: int = 0
    selected: Optional[int] = None
    score: Optional[int] = None
    review: Tuple[ReviewItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        q = self.question
        return {
            "phase": self.phase.value,
            "message": self.message,
            "question": (
                {"text": q.text, "options": list(q.options)} if q is not None else None
            ),
            "index": self.index,
            "total": self.total,
            "selected": self.selected,
            "score": self.score,
            "review": [
                {
                    "number": r.number,
                    "question": r.question,
                    "your_answer": r.your_answer,
                    "correct_answer": r.correct_answer,
                    "is_correct": r.is_correct,
                }
                for r in self.review
            ],
        }


OnChange = Callable[["QuizController"], Awaitable[None]]


class QuizController:
    """
    Phases:
    - LOADING   -> generation in flight, no interaction
    - ANSWERING -> current question shown, waiting for a pick
    - ADVANCING -> pick recorded, delayed advance pending (re-pick overwrites)
    - COMPLETE  -> last question answered, score + review available
    - ERROR     -> generation failed, retry available

    Events (select_option / retry / new_quiz) are called by the presentation
    layer, which re-renders itself afterwards. Transitions that happen later
    (generation finished, delayed advance fired) are reported via on_change.

    Every generation cycle gets a token; a result from an older cycle is
    dropped.
    """

    def __init__(
        self,
        llm,
        *,
        advance_delay: float = DEFAULT_ADVANCE_DELAY,
        on_change: Optional[OnChange] = None,
    ):
        self.llm = llm
        self.advance_delay = max(0.0, float(advance_delay))
        self.on_change = on_change

        self.phase = Phase.LOADING
        self.error_message = ""
        self.session = QuizSession()

        self._cycle = 0
        self._advance_task: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def cycle(self) -> int:
        return self._cycle

    # -----------------------------
    # generation cycle
    # -----------------------------
    def start(self) -> asyncio.Task:
        """Begin a fresh generation cycle; the returned task may be awaited."""
        cycle = self._begin_cycle()
        return self._spawn(self._run_cycle(cycle))

    async def load(self) -> None:
        await self.start()

    def _begin_cycle(self) -> int:
        self._cancel_advance()
        self._cycle += 1
        self.session = QuizSession()
        self.error_message = ""
        self.phase = Phase.LOADING
        log.info("Generation cycle %d started", self._cycle)
        return self._cycle

    def _is_stale(self, cycle: int) -> bool:
        return cycle != self._cycle

    async def _run_cycle(self, cycle: int) -> None:
        try:
            questions = await generate_news_quiz(self.llm)
        except QuizGenerationError as e:
            if self._is_stale(cycle):
                log.info("Dropping failure of stale cycle %d (current=%d)", cycle, self._cycle)
                return
            log.warning("Generation cycle %d failed: %s", cycle, e)
            self.error_message = e.message
            self.phase = Phase.ERROR
        except Exception:
            if self._is_stale(cycle):
                log.exception("Dropping crash of stale cycle %d", cycle)
                return
            log.exception("Generation cycle %d crashed", cycle)
            self.error_message = MSG_TRANSPORT
            self.phase = Phase.ERROR
        else:
            if self._is_stale(cycle):
                log.info("Dropping result of stale cycle %d (current=%d)", cycle, self._cycle)
                return
            self.session = QuizSession(questions=tuple(questions))
            self.phase = Phase.ANSWERING
            log.info("Generation cycle %d ready | questions=%d", cycle, self.session.total)

        await self._notify()

    # -----------------------------
    # events
    # -----------------------------
    def select_option(self, index: int) -> None:
        if self.phase not in (Phase.ANSWERING, Phase.ADVANCING):
            raise QuizStateError(f"Cannot select an option while {self.phase.value}")
        if isinstance(index, bool) or not isinstance(index, int):
            raise ValueError(f"Option index must be an integer: {index!r}")
        if not (0 <= index < OPTION_COUNT):
            raise ValueError(f"Option index out of range: {index}")

        current = self.session.current_index
        self.session.selected_answers[current] = index

        if self.phase is Phase.ADVANCING:
            # advance already scheduled; last pick wins
            return

        if self.session.is_last:
            self.session.complete = True
            self.phase = Phase.COMPLETE
            log.info(
                "Quiz complete | cycle=%d score=%d/%d",
                self._cycle,
                calculate_score(self.session),
                self.session.total,
            )
            return

        self.phase = Phase.ADVANCING
        self._advance_task = self._spawn(self._advance_later(self._cycle, current))

    def retry(self) -> asyncio.Task:
        if self.phase is not Phase.ERROR:
            raise QuizStateError(f"Cannot retry while {self.phase.value}")
        return self.start()

    def new_quiz(self) -> asyncio.Task:
        if self.phase is not Phase.COMPLETE:
            raise QuizStateError(f"Cannot start a new quiz while {self.phase.value}")
        return self.start()

    # -----------------------------
    # delayed advance
    # -----------------------------
    async def _advance_later(self, cycle: int, index: int) -> None:
        await asyncio.sleep(self.advance_delay)

        if self._is_stale(cycle) or self.phase is not Phase.ADVANCING:
            return
        if self.session.current_index != index:
            return

        self._advance_task = None
        self.session.current_index = index + 1
        self.phase = Phase.ANSWERING
        await self._notify()

    def _cancel_advance(self) -> None:
        if self._advance_task and not self._advance_task.done():
            self._advance_task.cancel()
        self._advance_task = None

    @property
    def advance_pending(self) -> bool:
        return bool(self._advance_task and not self._advance_task.done())

    # -----------------------------
    # helpers
    # -----------------------------
    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _notify(self) -> None:
        if self.on_change is None:
            return
        try:
            await self.on_change(self)
        except Exception:
            log.exception("Quiz on_change callback failed")

    def close(self) -> None:
        """Cancel everything still pending for this controller."""
        for task in list(self._tasks):
            if not task.done():
                task.cancel()
        self._advance_task = None

    def snapshot(self) -> QuizSnapshot:
        s = self.session
        if self.phase is Phase.LOADING:
            return QuizSnapshot(phase=self.phase)
        if self.phase is Phase.ERROR:
            return QuizSnapshot(phase=self.phase, message=self.error_message)
        if self.phase is Phase.COMPLETE:
            return QuizSnapshot(
                phase=self.phase,
                index=s.current_index,
                total=s.total,
                score=calculate_score(s),
                review=tuple(build_review(s)),
            )
        return QuizSnapshot(
            phase=self.phase,
            question=s.current_question,
            index=s.current_index,
            total=s.total,
            selected=s.selected_for_current(),
        )
