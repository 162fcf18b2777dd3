from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime


class AnswerInput(BaseModel):
    """A single answer to a word."""
    word_id: int
    correct: bool


class AnswerBatch(BaseModel):
    """Answers are applied in list order."""
    answers: List[AnswerInput] = Field(default_factory=list)


class WordStat(BaseModel):
    """Counters of one (user, word) pair, returned after each answer.

    Attributes:
        id: progress record ID
        word_id: answered word
        correct_count: number of correct answers
        incorrect_count: number of incorrect answers
        last_seen_at: time of the latest answer
    """
    id: int
    word_id: int
    correct_count: int
    incorrect_count: int
    last_seen_at: Optional[datetime] = None


class WordProgress(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    word_id: int
    state: str = Field(..., description="'unseen', 'in_progress' or 'learned'")
    learned_at: Optional[datetime] = None
    last_answer_at: Optional[datetime] = None
    correct_count: int = 0
    incorrect_count: int = 0
    total_tests: int = 0
    streak: int = 0


class UserStatSummary(BaseModel):
    """Aggregate statistics of a user.

    Attributes:
        words_learned: words answered correctly at least once
        sessions_completed: explicit session completions
        points: one per correct answer
        total_words: number of words in the whole catalog
        correct_total: correct answers over all words
        incorrect_total: incorrect answers over all words
    """
    words_learned: int = 0
    sessions_completed: int = 0
    points: int = 0
    total_words: int = 0
    correct_total: int = 0
    incorrect_total: int = 0
