from fastapi import Depends
from sqlalchemy.orm import Session

from wordbook.db.database import get_db
from wordbook.services.catalog_service import CatalogService
from wordbook.services.study_service import StudyService
from wordbook.services.user_service import UserService


# --- Service dependencies ---

def get_study_service(db: Session = Depends(get_db)) -> StudyService:
    """
    Study service bound to the request's database session
    """
    return StudyService(db)


def get_catalog_service(db: Session = Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)
