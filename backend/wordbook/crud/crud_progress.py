from typing import Dict, Iterable, List, Optional, Tuple
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.orm import Session
from wordbook.crud.base import CRUDBase
from wordbook.models.catalog import Word
from wordbook.models.progress import WordProgress, UserStat


class CRUDWordProgress(CRUDBase[WordProgress, BaseModel, BaseModel]):
    def get_by_user_word(
        self, db: Session, *, user_id: int, word_id: int, for_update: bool = False
    ) -> Optional[WordProgress]:
        """
        Fetch the progress row of one (user, word) pair.

        Args:
            db: database session
            user_id: learner ID
            word_id: word ID
            for_update: lock the row until the transaction ends (SELECT ... FOR UPDATE)

        Returns:
            Optional[WordProgress]: the row, or None when the word was never answered
        """
        query = db.query(WordProgress).filter(
            WordProgress.user_id == user_id,
            WordProgress.word_id == word_id,
        )
        if for_update:
            query = query.with_for_update()
        return query.populate_existing().first()

    def get_unlearned_words(
        self,
        db: Session,
        *,
        user_id: int,
        chapter_ids: Iterable[int],
        limit: Optional[int] = None
    ) -> List[Word]:
        """
        Words of the given chapters the user has not learned yet.

        Ordered by the word's `order` field, ties by ID; `limit` is applied after
        the learned words are filtered out.
        """
        chapter_ids = list(chapter_ids)
        if not chapter_ids:
            return []
        learned = (
            select(WordProgress.word_id)
            .where(
                WordProgress.user_id == user_id,
                WordProgress.learned_at.is_not(None),
            )
        )
        query = (
            db.query(Word)
            .filter(Word.chapter_id.in_(chapter_ids))
            .filter(Word.id.not_in(learned))
            .order_by(Word.order.asc(), Word.id.asc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def get_answer_totals(self, db: Session, *, user_id: int) -> Tuple[int, int]:
        """Sum of correct and incorrect answers over all words of a user."""
        correct, incorrect = (
            db.query(
                func.coalesce(func.sum(WordProgress.correct_count), 0),
                func.coalesce(func.sum(WordProgress.incorrect_count), 0),
            )
            .filter(WordProgress.user_id == user_id)
            .one()
        )
        return int(correct), int(incorrect)

    def remove_by_user(self, db: Session, *, user_id: int) -> int:
        deleted = (
            db.query(WordProgress)
            .filter(WordProgress.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.flush()
        return deleted


class CRUDUserStat(CRUDBase[UserStat, BaseModel, BaseModel]):
    def get_by_user(self, db: Session, *, user_id: int) -> Optional[UserStat]:
        return (
            db.query(UserStat)
            .filter(UserStat.user_id == user_id)
            .populate_existing()
            .first()
        )

    def increment(self, db: Session, *, user_id: int, **deltas: int) -> UserStat:
        """
        Add the given deltas to a user's stat row, creating the row when missing.

        The increments are evaluated by the database (`points = points + 1`) so
        concurrent answers never lose an update.

        Args:
            db: database session
            user_id: learner ID
            **deltas: column name -> amount, e.g. points=1, words_learned=1

        Returns:
            UserStat: the row after the increment
        """
        values: Dict = {
            getattr(UserStat, name): getattr(UserStat, name) + amount
            for name, amount in deltas.items()
            if amount
        }
        if values:
            db.query(UserStat).filter(UserStat.user_id == user_id).update(
                values, synchronize_session=False
            )
        stat = self.get_by_user(db, user_id=user_id)
        if stat is None:
            initial = {name: amount for name, amount in deltas.items() if amount}
            stat = self.create(db, obj_in={"user_id": user_id, **initial})
        return stat

    def reset(self, db: Session, *, user_id: int) -> UserStat:
        stat = self.get_by_user(db, user_id=user_id)
        if stat is None:
            return self.create(db, obj_in={"user_id": user_id})
        return self.update(db, db_obj=stat, obj_in={"words_learned": 0, "sessions_completed": 0, "points": 0})


word_progress = CRUDWordProgress(WordProgress)
user_stat = CRUDUserStat(UserStat)
