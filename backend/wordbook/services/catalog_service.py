import logging
from typing import Dict, List, Optional, Tuple
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordbook.core.exceptions import ConstraintViolationError, NotFoundError, UnauthorizedError
from wordbook.crud import language as crud_language, level as crud_level
from wordbook.crud import chapter as crud_chapter, word as crud_word, user as crud_user
from wordbook.models.catalog import Language, Level, Chapter, Word
from wordbook.models.user import User
from wordbook.schemas import catalog as schemas
from wordbook.schemas.catalog import ImportResult, normalize_translations
from wordbook.services.csv_import import (
    CHAPTER_HEADERS, FLAT_HEADERS, CsvImportError, CsvRow, parse_csv,
)

logger = logging.getLogger(__name__)


def _translation_map(value) -> Dict[str, Optional[str]]:
    if isinstance(value, schemas.Translations):
        value = value.model_dump()
    return normalize_translations(value)


class CatalogService:
    """
    Content catalog: languages, levels, chapters and words.

    Reads are open to everyone. Every mutation first re-reads the acting user
    and requires the admin flag; deletes cascade down the hierarchy and take the
    progress of the deleted words with them.
    """

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def require_admin(self, user_id: Optional[int]) -> User:
        user = crud_user.get(self.db, user_id)
        if user is None or not user.is_admin:
            logger.warning(f"Rejected catalog mutation by user {user_id}")
            raise UnauthorizedError("Not authorized.")
        return user

    def _require(self, crud, obj_id: int, label: str):
        obj = crud.get(self.db, obj_id)
        if obj is None:
            raise NotFoundError(f"{label} {obj_id} not found.")
        return obj

    def _commit(self, conflict_message: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolationError(conflict_message) from e

    def _flush_or_conflict(self, action, conflict_message: str):
        try:
            result = action()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolationError(conflict_message) from e
        self._commit(conflict_message)
        return result

    def _delete(self, crud, obj_id: int, label: str) -> bool:
        obj = self._require(crud, obj_id, label)
        self.db.delete(obj)
        self.db.commit()
        logger.info(f"Deleted {label.lower()} {obj_id}")
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_languages(self) -> List[Language]:
        return crud_language.get_ordered(self.db)

    def list_levels(self, language_id: int) -> List[Level]:
        return crud_level.get_by_language(self.db, language_id=language_id)

    def list_chapters(self, level_id: int) -> List[Chapter]:
        return crud_chapter.get_by_level(self.db, level_id=level_id)

    def list_words(self, chapter_id: int) -> List[Word]:
        return crud_word.get_by_chapter(self.db, chapter_id=chapter_id)

    def get_tree(self) -> List[Language]:
        return crud_language.get_tree(self.db)

    # ------------------------------------------------------------------
    # Languages
    # ------------------------------------------------------------------
    def create_language(self, user_id: int, data: schemas.LanguageCreate) -> Language:
        self.require_admin(user_id)
        values = data.model_dump()
        values["order"] = values["order"] if values["order"] is not None else 0
        language = self._flush_or_conflict(
            lambda: crud_language.create(self.db, obj_in=values),
            f"Language with key '{data.key}' already exists.",
        )
        logger.info(f"Created language {language.id} ({language.value})")
        return language

    def update_language(self, user_id: int, language_id: int, data: schemas.LanguageUpdate) -> Language:
        self.require_admin(user_id)
        language = self._require(crud_language, language_id, "Language")
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None or k == "description"}
        return self._flush_or_conflict(
            lambda: crud_language.update(self.db, db_obj=language, obj_in=changes),
            f"Language with key '{changes.get('key')}' already exists.",
        )

    def delete_language(self, user_id: int, language_id: int) -> bool:
        self.require_admin(user_id)
        return self._delete(crud_language, language_id, "Language")

    # ------------------------------------------------------------------
    # Levels
    # ------------------------------------------------------------------
    def create_level(self, user_id: int, language_id: int, data: schemas.LevelCreate) -> Level:
        self.require_admin(user_id)
        self._require(crud_language, language_id, "Language")
        values = {"language_id": language_id, "title": data.title, "order": data.order or 0}
        level = self._flush_or_conflict(
            lambda: crud_level.create(self.db, obj_in=values),
            f"Level '{data.title}' already exists in this language.",
        )
        logger.info(f"Created level {level.id} ({level.title}) in language {language_id}")
        return level

    def update_level(self, user_id: int, level_id: int, data: schemas.LevelUpdate) -> Level:
        self.require_admin(user_id)
        level = self._require(crud_level, level_id, "Level")
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return self._flush_or_conflict(
            lambda: crud_level.update(self.db, db_obj=level, obj_in=changes),
            f"Level '{changes.get('title')}' already exists in this language.",
        )

    def delete_level(self, user_id: int, level_id: int) -> bool:
        self.require_admin(user_id)
        return self._delete(crud_level, level_id, "Level")

    # ------------------------------------------------------------------
    # Chapters
    # ------------------------------------------------------------------
    def create_chapter(self, user_id: int, level_id: int, data: schemas.ChapterCreate) -> Chapter:
        self.require_admin(user_id)
        self._require(crud_level, level_id, "Level")
        values = {"level_id": level_id, "title": data.title, "order": data.order or 0}
        chapter = self._flush_or_conflict(
            lambda: crud_chapter.create(self.db, obj_in=values),
            f"Chapter '{data.title}' already exists in this level.",
        )
        logger.info(f"Created chapter {chapter.id} ({chapter.title}) in level {level_id}")
        return chapter

    def update_chapter(self, user_id: int, chapter_id: int, data: schemas.ChapterUpdate) -> Chapter:
        self.require_admin(user_id)
        chapter = self._require(crud_chapter, chapter_id, "Chapter")
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        return self._flush_or_conflict(
            lambda: crud_chapter.update(self.db, db_obj=chapter, obj_in=changes),
            f"Chapter '{changes.get('title')}' already exists in this level.",
        )

    def delete_chapter(self, user_id: int, chapter_id: int) -> bool:
        self.require_admin(user_id)
        return self._delete(crud_chapter, chapter_id, "Chapter")

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------
    def create_word(self, user_id: int, chapter_id: int, data: schemas.WordCreate) -> Word:
        self.require_admin(user_id)
        self._require(crud_chapter, chapter_id, "Chapter")
        values = {
            "chapter_id": chapter_id,
            "korean": data.korean,
            "translation": _translation_map(data.translation),
            "order": data.order or 0,
            "audio": data.audio,
        }
        word = self._flush_or_conflict(
            lambda: crud_word.create(self.db, obj_in=values),
            f"Word '{data.korean}' with order {values['order']} already exists in this chapter.",
        )
        logger.info(f"Created word {word.id} in chapter {chapter_id}")
        return word

    def update_word(self, user_id: int, word_id: int, data: schemas.WordUpdate) -> Word:
        self.require_admin(user_id)
        word = self._require(crud_word, word_id, "Word")
        changes = data.model_dump(exclude_unset=True)
        if changes.get("translation") is not None:
            changes["translation"] = _translation_map(data.translation)
        changes = {k: v for k, v in changes.items() if v is not None or k == "audio"}
        return self._flush_or_conflict(
            lambda: crud_word.update(self.db, db_obj=word, obj_in=changes),
            "A word with the same text and order already exists in this chapter.",
        )

    def delete_word(self, user_id: int, word_id: int) -> bool:
        self.require_admin(user_id)
        return self._delete(crud_word, word_id, "Word")

    # ------------------------------------------------------------------
    # CSV imports
    # ------------------------------------------------------------------
    def _insert_rows(self, rows: List[Tuple[int, CsvRow]], skipped: int) -> ImportResult:
        """Insert (chapter_id, row) pairs in one transaction, skipping duplicates."""
        seen = crud_word.get_keys(self.db, chapter_ids={chapter_id for chapter_id, _ in rows})
        data = []
        for chapter_id, row in rows:
            key = (chapter_id, row.korean, row.order)
            if key in seen:
                skipped += 1
                continue
            seen.add(key)
            data.append({
                "chapter_id": chapter_id,
                "korean": row.korean,
                "translation": normalize_translations(row.translation),
                "order": row.order,
            })
        try:
            inserted = crud_word.bulk_insert(self.db, rows=data) if data else 0
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("CSV import conflicted with concurrent changes; nothing inserted")
            return ImportResult(errors=["Import conflicted with concurrent changes; nothing was inserted."])
        return ImportResult(inserted=inserted, skipped=skipped, errors=[])

    def import_words(self, user_id: int, chapter_id: int, csv_text: str) -> ImportResult:
        """
        Import words into one chapter from CSV with the columns order, korean, translation.

        Returns:
            ImportResult: inserted and skipped counts, or the error that aborted the import
        """
        self.require_admin(user_id)
        chapter = self._require(crud_chapter, chapter_id, "Chapter")
        try:
            parsed = parse_csv(csv_text, CHAPTER_HEADERS)
        except CsvImportError as e:
            logger.warning(f"CSV import into chapter {chapter_id} aborted: {e.message}")
            return ImportResult(errors=[e.message])
        result = self._insert_rows([(chapter.id, row) for row in parsed.rows], parsed.skipped)
        logger.info(f"Imported {result.inserted} words into chapter {chapter_id} ({result.skipped} skipped)")
        return result

    def import_words_flat(self, user_id: int, level_id: int, csv_text: str) -> ImportResult:
        """Import words into the chapters of one level from CSV with an extra chapter column."""
        self.require_admin(user_id)
        level = self._require(crud_level, level_id, "Level")
        return self.load_flat_csv(level, csv_text)

    def load_flat_csv(self, level: Level, csv_text: str) -> ImportResult:
        """
        Load a flat CSV into a level without an authorization check (used by seeding).

        Chapters are matched by title; missing ones are created after the existing
        chapters in the order they first appear in the file.
        """
        try:
            parsed = parse_csv(csv_text, FLAT_HEADERS)
        except CsvImportError as e:
            logger.warning(f"CSV import into level {level.id} aborted: {e.message}")
            return ImportResult(errors=[e.message])

        titles = list(dict.fromkeys(row.chapter for row in parsed.rows))
        chapters = crud_chapter.get_by_titles(self.db, level_id=level.id, titles=titles)
        next_order = crud_chapter.get_max_order(self.db, level_id=level.id)
        try:
            for title in titles:
                if title not in chapters:
                    next_order += 1
                    chapters[title] = crud_chapter.create(
                        self.db, obj_in={"level_id": level.id, "title": title, "order": next_order}
                    )
                    logger.info(f"Created chapter '{title}' in level {level.id}")
        except IntegrityError:
            self.db.rollback()
            return ImportResult(errors=["Import conflicted with concurrent changes; nothing was inserted."])

        result = self._insert_rows([(chapters[row.chapter].id, row) for row in parsed.rows], parsed.skipped)
        logger.info(f"Imported {result.inserted} words into level {level.id} ({result.skipped} skipped)")
        return result
