from typing import Optional
from sqlalchemy.orm import Session
from wordbook.crud.base import CRUDBase
from wordbook.models.user import User
from wordbook.models.learning_settings import LearningSettings
from wordbook.schemas.user import UserUpsert, UserUpdate, LearningSettingsUpdate


class CRUDUser(CRUDBase[User, UserUpsert, UserUpdate]):
    def get_by_phone(self, db: Session, *, phone: str) -> Optional[User]:
        return db.query(User).filter(User.phone == phone).first()


class CRUDLearningSettings(CRUDBase[LearningSettings, LearningSettingsUpdate, LearningSettingsUpdate]):
    def get_by_user(self, db: Session, *, user_id: int) -> Optional[LearningSettings]:
        return db.query(LearningSettings).filter(LearningSettings.user_id == user_id).first()


user = CRUDUser(User)
learning_settings = CRUDLearningSettings(LearningSettings)
