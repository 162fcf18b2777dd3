"""
Shared fixtures: an in-memory SQLite database recreated for every test.
"""

import os
import pytest
from typing import Generator

# Point the application at in-memory SQLite before any wordbook module is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_PHONE"] = ""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from wordbook.core.config import settings
from wordbook.db.base_class import Base
from wordbook.db.database import engine, SessionLocal
from wordbook.main import app
from wordbook.models import Chapter, Language, Level, User, Word
from wordbook.schemas.user import UserUpsert
from wordbook.services.user_service import UserService

ADMIN_PHONE = "+998900000001"


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Test client sharing the per-test database"""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin(db: Session, monkeypatch) -> User:
    monkeypatch.setattr(settings, "ADMIN_PHONE", ADMIN_PHONE)
    return UserService(db).upsert_user(UserUpsert(name="Admin", phone=ADMIN_PHONE))


@pytest.fixture
def learner(db: Session) -> User:
    return UserService(db).upsert_user(UserUpsert(name="Learner", phone="+998900000002"))


@pytest.fixture
def level(db: Session) -> Level:
    language = Language(key="Korean_Language", value="Korean", order=1)
    level = Level(language=language, title="Level 1", order=1)
    db.add_all([language, level])
    db.commit()
    return level


@pytest.fixture
def chapter(db: Session, level: Level) -> Chapter:
    """Chapter with three words, inserted out of order"""
    chapter = Chapter(level=level, title="Chapter 1", order=1)
    db.add(chapter)
    db.flush()
    db.add_all([
        Word(chapter_id=chapter.id, korean="셋", translation={"en": "three", "ru": None, "uz": None}, order=3),
        Word(chapter_id=chapter.id, korean="하나", translation={"en": "one", "ru": "один", "uz": None}, order=1),
        Word(chapter_id=chapter.id, korean="둘", translation={"en": "two", "ru": None, "uz": None}, order=2),
    ])
    db.commit()
    return chapter


@pytest.fixture
def words(db: Session, chapter: Chapter):
    """Words of the chapter ordered by `order`: W1, W2, W3"""
    return db.query(Word).filter(Word.chapter_id == chapter.id).order_by(Word.order).all()
