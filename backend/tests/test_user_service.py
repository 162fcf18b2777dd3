"""
User service tests: upsert by phone, admin flag, learning settings.
"""

import pytest

from wordbook.core.config import settings
from wordbook.core.exceptions import ConstraintViolationError, NotFoundError, ValidationError
from wordbook.models import LearningSettings, User, UserStat, WordProgress
from wordbook.schemas.user import LearningSettingsUpdate, UserUpdate, UserUpsert
from wordbook.services.study_service import StudyService
from wordbook.services.user_service import UserService

ADMIN_PHONE = "+998900000001"


def test_upsert_creates_user_with_stat_and_settings(db):
    user = UserService(db).upsert_user(UserUpsert(name="Ali", phone="+998911111111"))

    assert user.id is not None
    assert user.is_admin is False
    stat = db.query(UserStat).filter(UserStat.user_id == user.id).one()
    assert (stat.words_learned, stat.sessions_completed, stat.points) == (0, 0, 0)
    prefs = db.query(LearningSettings).filter(LearningSettings.user_id == user.id).one()
    assert prefs.learn_session_size == settings.DEFAULT_LEARN_SESSION_SIZE
    assert prefs.speed_review_session_size == settings.DEFAULT_SPEED_REVIEW_SESSION_SIZE


def test_upsert_same_phone_updates_name(db):
    service = UserService(db)
    first = service.upsert_user(UserUpsert(name="Ali", phone="+998911111111"))
    second = service.upsert_user(UserUpsert(name="Ali V.", phone="+998911111111"))

    assert second.id == first.id
    assert second.name == "Ali V."
    assert db.query(User).count() == 1
    assert db.query(UserStat).count() == 1


def test_admin_follows_configured_phone(db, monkeypatch):
    service = UserService(db)
    monkeypatch.setattr(settings, "ADMIN_PHONE", ADMIN_PHONE)

    user = service.upsert_user(UserUpsert(name="Boss", phone=ADMIN_PHONE))
    assert user.is_admin is True

    user = service.update_user(user.id, UserUpdate(name="Boss", phone="+998922222222"))
    assert user.is_admin is False


def test_empty_admin_phone_grants_nothing(db, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PHONE", "")

    assert UserService(db).upsert_user(UserUpsert(name="Ali", phone="+998911111111")).is_admin is False


def test_get_user(db, learner):
    service = UserService(db)

    assert service.get_user(user_id=learner.id).phone == learner.phone
    assert service.get_user(phone=learner.phone).id == learner.id
    with pytest.raises(NotFoundError):
        service.get_user(phone="+000")
    with pytest.raises(ValidationError):
        service.get_user()


def test_update_user_duplicate_phone(db, learner, admin):
    with pytest.raises(ConstraintViolationError):
        UserService(db).update_user(learner.id, UserUpdate(name="Learner", phone=admin.phone))


def test_delete_user_cascades(db, learner, words):
    StudyService(db).record_answer(learner.id, words[0].id, True)

    assert UserService(db).delete_user(learner.id) is True

    db.expire_all()
    assert db.query(User).count() == 0
    assert db.query(WordProgress).count() == 0
    assert db.query(UserStat).count() == 0
    assert db.query(LearningSettings).count() == 0


def test_update_learning_settings_partially(db, learner):
    service = UserService(db)

    updated = service.update_learning_settings(
        learner.id, LearningSettingsUpdate(review_session_size=25, enable_listening=False)
    )

    assert updated.review_session_size == 25
    assert updated.enable_listening is False
    assert updated.learn_session_size == settings.DEFAULT_LEARN_SESSION_SIZE
    assert updated.enable_typing is True


def test_learning_settings_created_when_missing(db, learner):
    db.query(LearningSettings).delete()
    db.commit()
    service = UserService(db)

    created = service.update_learning_settings(learner.id, LearningSettingsUpdate(learn_session_size=5))
    assert created.learn_session_size == 5
    assert created.review_session_size == settings.DEFAULT_REVIEW_SESSION_SIZE
    assert service.get_learning_settings(learner.id).id == created.id


def test_learning_settings_sizes_must_be_positive():
    with pytest.raises(ValueError):
        LearningSettingsUpdate(learn_session_size=0)
