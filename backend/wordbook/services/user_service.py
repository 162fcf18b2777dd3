import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from wordbook.core.config import settings
from wordbook.core.exceptions import ConstraintViolationError, NotFoundError, ValidationError
from wordbook.crud import user as crud_user, user_stat as crud_user_stat
from wordbook.crud import learning_settings as crud_learning_settings
from wordbook.models.learning_settings import LearningSettings
from wordbook.models.user import User
from wordbook.schemas.user import LearningSettingsUpdate, UserUpdate, UserUpsert

logger = logging.getLogger(__name__)


def is_admin_phone(phone: str) -> bool:
    """Admin rights follow the configured admin phone; an empty setting grants them to nobody."""
    return bool(settings.ADMIN_PHONE) and phone == settings.ADMIN_PHONE


def default_learning_settings() -> dict:
    return {
        "learn_session_size": settings.DEFAULT_LEARN_SESSION_SIZE,
        "review_session_size": settings.DEFAULT_REVIEW_SESSION_SIZE,
        "speed_review_session_size": settings.DEFAULT_SPEED_REVIEW_SESSION_SIZE,
        "enable_typing": True,
        "enable_tapping": True,
        "enable_listening": True,
    }


class UserService:
    """Learner accounts and their study preferences."""

    def __init__(self, db: Session):
        self.db = db

    def _require_user(self, user_id: int) -> User:
        user = crud_user.get(self.db, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found.")
        return user

    def upsert_user(self, data: UserUpsert) -> User:
        """
        Find a user by phone and update the name, or create the user together
        with an empty stat row and default learning settings.

        Args:
            data: name and phone

        Returns:
            User: the stored user, with `is_admin` recomputed
        """
        try:
            user = crud_user.get_by_phone(self.db, phone=data.phone)
            if user is not None:
                user = crud_user.update(
                    self.db, db_obj=user, obj_in={"name": data.name, "is_admin": is_admin_phone(data.phone)}
                )
                created = False
            else:
                user = crud_user.create(
                    self.db,
                    obj_in={"name": data.name, "phone": data.phone, "is_admin": is_admin_phone(data.phone)},
                )
                crud_user_stat.create(self.db, obj_in={"user_id": user.id})
                crud_learning_settings.create(self.db, obj_in={"user_id": user.id, **default_learning_settings()})
                created = True
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolationError(f"User with phone '{data.phone}' already exists.") from e
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"{'Created' if created else 'Updated'} user {user.id} (admin={user.is_admin})")
        return user

    def get_user(self, user_id: Optional[int] = None, phone: Optional[str] = None) -> User:
        if user_id is None and not phone:
            raise ValidationError("Either user_id or phone is required.")
        if user_id is not None:
            return self._require_user(user_id)
        user = crud_user.get_by_phone(self.db, phone=phone)
        if user is None:
            raise NotFoundError(f"User with phone '{phone}' not found.")
        return user

    def update_user(self, user_id: int, data: UserUpdate) -> User:
        user = self._require_user(user_id)
        try:
            user = crud_user.update(
                self.db,
                db_obj=user,
                obj_in={"name": data.name, "phone": data.phone, "is_admin": is_admin_phone(data.phone)},
            )
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConstraintViolationError(f"User with phone '{data.phone}' already exists.") from e
        logger.info(f"Updated user {user_id}")
        return user

    def delete_user(self, user_id: int) -> bool:
        """Delete the user with all progress, stats and settings."""
        user = self._require_user(user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {user_id}")
        return True

    # ------------------------------------------------------------------
    # Learning settings
    # ------------------------------------------------------------------
    def get_learning_settings(self, user_id: int) -> LearningSettings:
        self._require_user(user_id)
        record = crud_learning_settings.get_by_user(self.db, user_id=user_id)
        if record is None:
            record = crud_learning_settings.create(
                self.db, obj_in={"user_id": user_id, **default_learning_settings()}
            )
            self.db.commit()
        return record

    def update_learning_settings(self, user_id: int, data: LearningSettingsUpdate) -> LearningSettings:
        """Change only the provided fields; a missing row starts from the configured defaults."""
        self._require_user(user_id)
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        try:
            record = crud_learning_settings.get_by_user(self.db, user_id=user_id)
            if record is None:
                record = crud_learning_settings.create(
                    self.db, obj_in={"user_id": user_id, **default_learning_settings(), **changes}
                )
            else:
                record = crud_learning_settings.update(self.db, db_obj=record, obj_in=changes)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Updated learning settings of user {user_id}: {sorted(changes)}")
        return record
