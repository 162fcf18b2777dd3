from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from wordbook.db.base_class import Base
from wordbook.db.types import UTCDateTime

class WordProgress(Base):
    """Per (user, word) progress record

    Single source of truth for answer counters; aggregate totals and the
    word stat projection returned after an answer are derived from it.

    Attributes:
        id: autoincrement ID
        user_id: learner
        word_id: studied word
        learned_at: first correct answer, never cleared by later answers
        last_answer_at: time of the latest answer
        correct_count: number of correct answers
        incorrect_count: number of incorrect answers
        total_tests: number of answers
        streak: consecutive correct answers, reset to 0 by an incorrect one
    """
    __tablename__ = "word_progress"
    __table_args__ = (UniqueConstraint("user_id", "word_id", name="uq_word_progress_user_word"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    word_id = Column(Integer, ForeignKey("words.id", ondelete="CASCADE"), index=True, nullable=False)
    learned_at = Column(UTCDateTime, nullable=True)
    last_answer_at = Column(UTCDateTime, nullable=True)
    correct_count = Column(Integer, nullable=False, default=0)
    incorrect_count = Column(Integer, nullable=False, default=0)
    total_tests = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="progress")
    word = relationship("Word", back_populates="progress")


class UserStat(Base):
    """One aggregate row per user: learned words, completed sessions, points."""
    __tablename__ = "user_stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    words_learned = Column(Integer, nullable=False, default=0)
    sessions_completed = Column(Integer, nullable=False, default=0)
    points = Column(Integer, nullable=False, default=0)

    user = relationship("User", back_populates="stat")
