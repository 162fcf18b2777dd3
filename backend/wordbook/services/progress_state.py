"""
Per-word progress state machine

Every (user, word) pair is in exactly one of three states:
- Unseen: the word was never answered (no progress row)
- InProgress: answered only incorrectly so far
- Learned: answered correctly at least once; `learned_at` is the first correct answer

Transitions on an answer:
- correct:   Unseen | InProgress -> Learned (learned_now), Learned -> Learned
- incorrect: Unseen | InProgress -> InProgress, Learned -> Learned

Counters move the same way in every state: the matching correct/incorrect count
and `total_tests` grow by one, `streak` grows by one on a correct answer and is
reset to 0 on an incorrect one. No transition leaves Learned, which is what keeps
learning monotonic; only clearing a user's words deletes the state.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class Counts:
    correct: int = 0
    incorrect: int = 0
    total_tests: int = 0

    def add(self, correct: bool) -> "Counts":
        return Counts(
            correct=self.correct + (1 if correct else 0),
            incorrect=self.incorrect + (0 if correct else 1),
            total_tests=self.total_tests + 1,
        )


@dataclass(frozen=True)
class Unseen:
    name = "unseen"


@dataclass(frozen=True)
class InProgress:
    counts: Counts
    streak: int
    last_answer_at: Optional[datetime] = None
    name = "in_progress"


@dataclass(frozen=True)
class Learned:
    learned_at: datetime
    counts: Counts
    streak: int
    last_answer_at: Optional[datetime] = None
    name = "learned"


ProgressState = Union[Unseen, InProgress, Learned]


@dataclass(frozen=True)
class AnswerOutcome:
    """Result of one answer: the new state and whether it made the word learned."""
    state: ProgressState
    learned_now: bool


def apply_answer(state: ProgressState, correct: bool, now: datetime) -> AnswerOutcome:
    """
    Apply one answer to a progress state.

    Args:
        state: state before the answer
        correct: whether the answer was correct
        now: answer time

    Returns:
        AnswerOutcome: new state; `learned_now` is True only for the first correct answer
    """
    if isinstance(state, Unseen):
        counts, streak = Counts(), 0
    else:
        counts, streak = state.counts, state.streak

    counts = counts.add(correct)
    streak = streak + 1 if correct else 0

    if isinstance(state, Learned):
        return AnswerOutcome(
            state=replace(state, counts=counts, streak=streak, last_answer_at=now),
            learned_now=False,
        )
    if correct:
        return AnswerOutcome(
            state=Learned(learned_at=now, counts=counts, streak=streak, last_answer_at=now),
            learned_now=True,
        )
    return AnswerOutcome(
        state=InProgress(counts=counts, streak=streak, last_answer_at=now),
        learned_now=False,
    )


def state_from_record(record: Any) -> ProgressState:
    """Rebuild the state of a stored progress row; None means the word is unseen."""
    if record is None:
        return Unseen()
    counts = Counts(
        correct=record.correct_count or 0,
        incorrect=record.incorrect_count or 0,
        total_tests=record.total_tests or 0,
    )
    if record.learned_at is not None:
        return Learned(
            learned_at=record.learned_at,
            counts=counts,
            streak=record.streak or 0,
            last_answer_at=record.last_answer_at,
        )
    return InProgress(counts=counts, streak=record.streak or 0, last_answer_at=record.last_answer_at)


def to_columns(state: ProgressState) -> Dict[str, Any]:
    """Column values of a progress row holding this state."""
    if isinstance(state, Unseen):
        return {
            "learned_at": None,
            "last_answer_at": None,
            "correct_count": 0,
            "incorrect_count": 0,
            "total_tests": 0,
            "streak": 0,
        }
    return {
        "learned_at": state.learned_at if isinstance(state, Learned) else None,
        "last_answer_at": state.last_answer_at,
        "correct_count": state.counts.correct,
        "incorrect_count": state.counts.incorrect,
        "total_tests": state.counts.total_tests,
        "streak": state.streak,
    }
