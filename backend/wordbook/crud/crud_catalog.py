from typing import Dict, Iterable, List, Optional, Set, Tuple
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload
from wordbook.crud.base import CRUDBase, SortDirection
from wordbook.models.catalog import Language, Level, Chapter, Word
from wordbook.schemas.catalog import (
    LanguageCreate, LanguageUpdate, LevelCreate, LevelUpdate,
    ChapterCreate, ChapterUpdate, WordCreate, WordUpdate,
)

# Catalog entities are always listed by their order field, ties by insertion
ORDERED = [("order", SortDirection.ASC), ("id", SortDirection.ASC)]


class CRUDLanguage(CRUDBase[Language, LanguageCreate, LanguageUpdate]):
    def get_ordered(self, db: Session) -> List[Language]:
        return self.get_multi(db, sort_by=ORDERED)

    def get_by_key(self, db: Session, *, key: str) -> Optional[Language]:
        return db.query(Language).filter(Language.key == key).first()

    def get_tree(self, db: Session) -> List[Language]:
        """Load every language with its levels, chapters and words in a few queries."""
        return (
            db.query(Language)
            .options(
                selectinload(Language.levels)
                .selectinload(Level.chapters)
                .selectinload(Chapter.words)
            )
            .order_by(Language.order.asc(), Language.id.asc())
            .all()
        )


class CRUDLevel(CRUDBase[Level, LevelCreate, LevelUpdate]):
    def get_by_language(self, db: Session, *, language_id: int) -> List[Level]:
        return self.get_multi(db, filter_conditions={"language_id": language_id}, sort_by=ORDERED)

    def get_by_title(self, db: Session, *, language_id: int, title: str) -> Optional[Level]:
        return (
            db.query(Level)
            .filter(Level.language_id == language_id, Level.title == title)
            .first()
        )


class CRUDChapter(CRUDBase[Chapter, ChapterCreate, ChapterUpdate]):
    def get_by_level(self, db: Session, *, level_id: int) -> List[Chapter]:
        return self.get_multi(db, filter_conditions={"level_id": level_id}, sort_by=ORDERED)

    def get_by_titles(self, db: Session, *, level_id: int, titles: Iterable[str]) -> Dict[str, Chapter]:
        """Map chapter title -> chapter for the given titles inside one level."""
        titles = list(titles)
        if not titles:
            return {}
        rows = (
            db.query(Chapter)
            .filter(Chapter.level_id == level_id, Chapter.title.in_(titles))
            .all()
        )
        return {row.title: row for row in rows}

    def get_max_order(self, db: Session, *, level_id: int) -> int:
        value = db.query(func.max(Chapter.order)).filter(Chapter.level_id == level_id).scalar()
        return value or 0


class CRUDWord(CRUDBase[Word, WordCreate, WordUpdate]):
    def get_by_chapter(self, db: Session, *, chapter_id: int) -> List[Word]:
        return self.get_multi(db, filter_conditions={"chapter_id": chapter_id}, sort_by=ORDERED)

    def get_total_count(self, db: Session) -> int:
        return db.query(func.count(Word.id)).scalar() or 0

    def get_keys(self, db: Session, *, chapter_ids: Iterable[int]) -> Set[Tuple[int, str, int]]:
        """Duplicate keys (chapter_id, korean, order) already stored in the given chapters."""
        chapter_ids = list(chapter_ids)
        if not chapter_ids:
            return set()
        rows = (
            db.query(Word.chapter_id, Word.korean, Word.order)
            .filter(Word.chapter_id.in_(chapter_ids))
            .all()
        )
        return {(row[0], row[1], row[2]) for row in rows}

    def bulk_insert(self, db: Session, *, rows: List[dict]) -> int:
        """Insert all rows in the current transaction and return how many were added."""
        db.add_all([Word(**row) for row in rows])
        db.flush()
        return len(rows)


language = CRUDLanguage(Language)
level = CRUDLevel(Level)
chapter = CRUDChapter(Chapter)
word = CRUDWord(Word)
