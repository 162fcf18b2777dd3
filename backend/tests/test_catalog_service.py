"""
Catalog service tests: admin checks, cascading deletes, unique keys and CSV imports.
"""

import pytest
from sqlalchemy.orm import Session

from wordbook.core.exceptions import ConstraintViolationError, NotFoundError, UnauthorizedError
from wordbook.models import Chapter, Language, Level, Word, WordProgress
from wordbook.schemas import catalog as schemas
from wordbook.services.catalog_service import CatalogService
from wordbook.services.study_service import StudyService


# --- Admin checks ---

def test_non_admin_cannot_mutate(db, learner, level, chapter, words):
    service = CatalogService(db)

    with pytest.raises(UnauthorizedError):
        service.create_language(learner.id, schemas.LanguageCreate(value="Japanese"))
    with pytest.raises(UnauthorizedError):
        service.update_chapter(learner.id, chapter.id, schemas.ChapterUpdate(title="Renamed"))
    with pytest.raises(UnauthorizedError):
        service.delete_word(learner.id, words[0].id)
    with pytest.raises(UnauthorizedError):
        service.import_words(learner.id, chapter.id, "order,korean,translation\n9,구,nine\n")

    assert db.query(Language).count() == 1
    assert db.query(Word).count() == 3


@pytest.mark.parametrize("user_id", [None, 9999])
def test_missing_user_is_unauthorized(db, level, user_id):
    with pytest.raises(UnauthorizedError):
        CatalogService(db).create_level(user_id, level.language_id, schemas.LevelCreate(title="Level 2"))


def test_admin_flag_is_rechecked_on_every_call(db, admin, level):
    service = CatalogService(db)
    service.create_chapter(admin.id, level.id, schemas.ChapterCreate(title="A"))

    admin.is_admin = False
    db.commit()

    with pytest.raises(UnauthorizedError):
        service.create_chapter(admin.id, level.id, schemas.ChapterCreate(title="B"))


# --- Create / update / delete ---

def test_create_hierarchy(db, admin):
    service = CatalogService(db)

    language = service.create_language(admin.id, schemas.LanguageCreate(key="Korean_Language", value="Korean"))
    level = service.create_level(admin.id, language.id, schemas.LevelCreate(title="Level 1", order=1))
    chapter = service.create_chapter(admin.id, level.id, schemas.ChapterCreate(title="Greetings"))
    word = service.create_word(
        admin.id, chapter.id, schemas.WordCreate(korean="안녕", translation="hello", order=1)
    )

    assert language.order == 0
    assert word.translation == {"en": "hello", "ru": None, "uz": None}
    tree = service.get_tree()
    assert tree[0].levels[0].chapters[0].words[0].korean == "안녕"


def test_create_word_with_translation_map(db, admin, chapter):
    word = CatalogService(db).create_word(
        admin.id, chapter.id,
        schemas.WordCreate(korean="물", translation=schemas.Translations(en="water", ru="вода"), order=4),
    )

    assert word.translation == {"en": "water", "ru": "вода", "uz": None}


def test_missing_parent_is_not_found(db, admin):
    service = CatalogService(db)

    with pytest.raises(NotFoundError):
        service.create_level(admin.id, 9999, schemas.LevelCreate(title="Level 1"))
    with pytest.raises(NotFoundError):
        service.create_word(admin.id, 9999, schemas.WordCreate(korean="물", translation="water"))
    with pytest.raises(NotFoundError):
        service.delete_language(admin.id, 9999)


def test_update_keeps_omitted_fields(db, admin, chapter):
    updated = CatalogService(db).update_chapter(admin.id, chapter.id, schemas.ChapterUpdate(title="Numbers"))

    assert updated.title == "Numbers"
    assert updated.order == 1


def test_update_word(db, admin, words):
    updated = CatalogService(db).update_word(
        admin.id, words[0].id, schemas.WordUpdate(translation="one (native)")
    )

    assert updated.translation["en"] == "one (native)"
    assert updated.korean == "하나"


def test_duplicate_titles_are_constraint_violations(db, admin, level, chapter):
    service = CatalogService(db)

    with pytest.raises(ConstraintViolationError) as exc:
        service.create_chapter(admin.id, level.id, schemas.ChapterCreate(title="Chapter 1"))
    assert "Chapter 1" in exc.value.message

    with pytest.raises(ConstraintViolationError):
        service.create_level(admin.id, level.language_id, schemas.LevelCreate(title="Level 1"))

    # the session stays usable after the rollback
    assert len(service.list_chapters(level.id)) == 1


def test_duplicate_language_key(db, admin, level):
    with pytest.raises(ConstraintViolationError):
        CatalogService(db).create_language(admin.id, schemas.LanguageCreate(key="Korean_Language", value="Again"))


def test_delete_language_cascades(db, admin, learner, level, chapter, words):
    StudyService(db).record_answer(learner.id, words[0].id, True)

    assert CatalogService(db).delete_language(admin.id, level.language_id) is True

    db.expire_all()
    assert db.query(Level).count() == 0
    assert db.query(Chapter).count() == 0
    assert db.query(Word).count() == 0
    assert db.query(WordProgress).count() == 0


def test_delete_word_removes_progress(db, admin, learner, words):
    StudyService(db).record_answer(learner.id, words[0].id, False)

    CatalogService(db).delete_word(admin.id, words[0].id)

    assert db.query(WordProgress).count() == 0
    assert db.query(Word).count() == 2


def test_reads_are_ordered(db, admin, level):
    service = CatalogService(db)
    for title, order in [("C", 2), ("A", 1), ("B", 2)]:
        service.create_chapter(admin.id, level.id, schemas.ChapterCreate(title=title, order=order))

    assert [c.title for c in service.list_chapters(level.id)] == ["A", "C", "B"]


# --- CSV imports ---

def test_import_into_chapter(db, admin, chapter):
    csv_text = (
        "order,korean,translation\n"
        "4,넷,four\n"
        "1,하나,one\n"
        "5,,five\n"
        "6,여섯,six\n"
        "6,여섯,six\n"
    )
    result = CatalogService(db).import_words(admin.id, chapter.id, csv_text)

    # 하나/1 already exists, the second 여섯/6 repeats an earlier row
    assert result.model_dump() == {"inserted": 2, "skipped": 3, "errors": []}
    assert db.query(Word).filter(Word.chapter_id == chapter.id).count() == 5


def test_import_with_bad_headers_inserts_nothing(db, admin, chapter):
    result = CatalogService(db).import_words(admin.id, chapter.id, "order,korean\n1,하나\n")

    assert result.inserted == 0
    assert result.errors == ["CSV headers must be exactly: order, korean, translation."]


def test_import_into_unknown_chapter(db, admin):
    with pytest.raises(NotFoundError):
        CatalogService(db).import_words(admin.id, 9999, "order,korean,translation\n1,하나,one\n")


def test_flat_import(db, admin, level, chapter):
    csv_text = (
        "order,korean,translation,chapter\n"
        "1,사과,apple,Food\n"
        "2,,banana,Food\n"
        "9,구,nine,Chapter 1\n"
        "2,물,water,Food\n"
    )
    result = CatalogService(db).import_words_flat(admin.id, level.id, csv_text)

    assert result.model_dump() == {"inserted": 3, "skipped": 1, "errors": []}
    chapters = CatalogService(db).list_chapters(level.id)
    assert [c.title for c in chapters] == ["Chapter 1", "Food"]
    assert chapters[1].order == 2
    assert [w.korean for w in CatalogService(db).list_words(chapters[1].id)] == ["사과", "물"]


def test_flat_import_missing_translation_header(db, admin, level):
    result = CatalogService(db).import_words_flat(admin.id, level.id, "order,korean,chapter\n1,사과,Food\n")

    assert result.model_dump() == {
        "inserted": 0,
        "skipped": 0,
        "errors": ["CSV headers must be exactly: order, korean, translation, chapter."],
    }
    assert db.query(Chapter).count() == 0


def test_flat_import_json_translation(db, admin, level):
    csv_text = 'order,korean,translation,chapter\n1,사과,"{""en"": ""apple"", ""uz"": ""olma""}",Food\n'

    CatalogService(db).import_words_flat(admin.id, level.id, csv_text)

    word = db.query(Word).one()
    assert word.translation == {"en": "apple", "ru": None, "uz": "olma"}


def test_import_with_huge_order_skips_the_row(db, admin, chapter):
    csv_text = "order,korean,translation\n100000000000000000000,가,go\n4,나,na\n"

    result = CatalogService(db).import_words(admin.id, chapter.id, csv_text)

    assert result.model_dump() == {"inserted": 1, "skipped": 1, "errors": []}
    assert [w.korean for w in CatalogService(db).list_words(chapter.id)] == ["하나", "둘", "셋", "나"]
