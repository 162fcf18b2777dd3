import logging
from datetime import datetime, UTC
from typing import Iterable, List, Optional, Sequence, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordbook.core.config import settings
from wordbook.core.exceptions import ConstraintViolationError, NotFoundError
from wordbook.crud import word as crud_word, user as crud_user
from wordbook.crud import word_progress as crud_word_progress, user_stat as crud_user_stat
from wordbook.models.catalog import Word
from wordbook.models.progress import WordProgress
from wordbook.models.user import User
from wordbook.schemas.study import AnswerInput, UserStatSummary, WordStat, WordProgress as WordProgressSchema
from wordbook.services.progress_state import apply_answer, state_from_record, to_columns

logger = logging.getLogger(__name__)


def to_word_stat(record: WordProgress) -> WordStat:
    """Project a progress row onto the counters returned after an answer."""
    return WordStat(
        id=record.id,
        word_id=record.word_id,
        correct_count=record.correct_count,
        incorrect_count=record.incorrect_count,
        last_seen_at=record.last_answer_at,
    )


class StudyService:
    """
    Study session workflows of one learner: choosing the words of a session,
    recording answers, completing sessions and reporting statistics.

    Every mutating method runs in a single transaction on the given session and
    rolls it back on error, so a failed call leaves no partial state behind.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    def _require_user(self, user_id: int) -> User:
        user = crud_user.get(self.db, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.")
        return user

    def _require_words(self, word_ids: Iterable[int]) -> None:
        for word_id in dict.fromkeys(word_ids):
            if crud_word.get(self.db, word_id) is None:
                raise NotFoundError(f"Word {word_id} not found.")

    # ------------------------------------------------------------------
    # Session word selector
    # ------------------------------------------------------------------
    def select_session_words(
        self, user_id: int, chapter_ids: Iterable[int], limit: Optional[int] = None
    ) -> List[Word]:
        """
        Words of the given chapters the user has not learned yet.

        Args:
            user_id: learner ID
            chapter_ids: chapters to draw from; unknown IDs contribute nothing
            limit: optional maximum, clamped to the configured range

        Returns:
            List[Word]: words ordered by their `order` field, then by ID
        """
        self._require_user(user_id)
        chapter_ids = list(dict.fromkeys(chapter_ids or []))
        if not chapter_ids:
            return []
        if limit is not None:
            limit = min(max(limit, settings.SESSION_WORDS_MIN_LIMIT), settings.SESSION_WORDS_MAX_LIMIT)
        return crud_word_progress.get_unlearned_words(
            self.db, user_id=user_id, chapter_ids=chapter_ids, limit=limit
        )

    # ------------------------------------------------------------------
    # Answer processor
    # ------------------------------------------------------------------
    def _apply_answer(self, user_id: int, word_id: int, correct: bool) -> WordProgress:
        record = crud_word_progress.get_by_user_word(
            self.db, user_id=user_id, word_id=word_id, for_update=True
        )
        outcome = apply_answer(state_from_record(record), correct, datetime.now(UTC))
        columns = to_columns(outcome.state)
        if record is None:
            record = crud_word_progress.create(
                self.db, obj_in={"user_id": user_id, "word_id": word_id, **columns}
            )
        else:
            record = crud_word_progress.update(self.db, db_obj=record, obj_in=columns)

        if outcome.learned_now:
            crud_user_stat.increment(self.db, user_id=user_id, words_learned=1, points=1)
        elif correct:
            crud_user_stat.increment(self.db, user_id=user_id, points=1)

        logger.debug(
            f"Answer user={user_id} word={word_id} correct={correct} -> "
            f"{outcome.state.name} (learned_now={outcome.learned_now})"
        )
        return record

    def _apply_answers(self, user_id: int, answers: Sequence[Tuple[int, bool]]) -> List[WordProgress]:
        # A concurrent first answer to the same word can win the insert race;
        # the retry then sees its row and applies this answer on top of it.
        for attempt in range(2):
            try:
                self._require_user(user_id)
                self._require_words(word_id for word_id, _ in answers)
                records = [self._apply_answer(user_id, word_id, correct) for word_id, correct in answers]
                self.db.commit()
                return records
            except IntegrityError as e:
                self.db.rollback()
                if attempt:
                    raise ConstraintViolationError("Answer conflicted with a concurrent update.") from e
                logger.warning(f"Retrying answers of user {user_id} after a concurrent insert")
            except Exception:
                self.db.rollback()
                raise
        return []

    def record_answer(self, user_id: int, word_id: int, correct: bool) -> WordStat:
        """
        Record one answer and update the word progress and the user's stats.

        The first correct answer marks the word learned and adds one learned word
        and one point; later correct answers add a point only; incorrect answers
        leave the user's stats untouched.

        Raises:
            NotFoundError: the user or the word does not exist
        """
        record = self._apply_answers(user_id, [(word_id, correct)])[0]
        return to_word_stat(record)

    def record_answers(self, user_id: int, answers: Sequence[AnswerInput]) -> bool:
        """Record a batch of answers in order, all in one transaction."""
        self._apply_answers(user_id, [(answer.word_id, answer.correct) for answer in answers])
        logger.info(f"Recorded {len(answers)} answers for user {user_id}")
        return True

    def get_word_progress(self, user_id: int, word_id: int) -> WordProgressSchema:
        self._require_user(user_id)
        self._require_words([word_id])
        record = crud_word_progress.get_by_user_word(self.db, user_id=user_id, word_id=word_id)
        state = state_from_record(record)
        return WordProgressSchema(word_id=word_id, state=state.name, **to_columns(state))

    # ------------------------------------------------------------------
    # Session completion and statistics
    # ------------------------------------------------------------------
    def _summary(self, user_id: int) -> UserStatSummary:
        stat = crud_user_stat.get_by_user(self.db, user_id=user_id)
        correct_total, incorrect_total = crud_word_progress.get_answer_totals(self.db, user_id=user_id)
        return UserStatSummary(
            words_learned=stat.words_learned if stat else 0,
            sessions_completed=stat.sessions_completed if stat else 0,
            points=stat.points if stat else 0,
            total_words=crud_word.get_total_count(self.db),
            correct_total=correct_total,
            incorrect_total=incorrect_total,
        )

    def complete_session(self, user_id: int) -> UserStatSummary:
        """Count one completed session and return the fresh summary."""
        try:
            self._require_user(user_id)
            crud_user_stat.increment(self.db, user_id=user_id, sessions_completed=1)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"User {user_id} completed a session")
        return self._summary(user_id)

    def get_stats(self, user_id: int) -> UserStatSummary:
        self._require_user(user_id)
        return self._summary(user_id)

    def clear_words(self, user_id: int) -> bool:
        """Forget every word the user studied and reset the user's counters."""
        try:
            self._require_user(user_id)
            removed = crud_word_progress.remove_by_user(self.db, user_id=user_id)
            crud_user_stat.reset(self.db, user_id=user_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Cleared {removed} progress records of user {user_id}")
        return True
