"""
Database initialization: table creation and catalog seeding from a flat CSV.
"""

import logging
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from wordbook.crud import language as crud_language, level as crud_level
from wordbook.db.base_class import Base
from wordbook.db.database import engine as default_engine
from wordbook.schemas.catalog import ImportResult
from wordbook.services.catalog_service import CatalogService

# Register every model on Base.metadata
import wordbook.models  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Optional[Engine] = None) -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine or default_engine)


def seed_from_csv(
        db: Session,
        csv_text: str,
        language_key: str,
        language_value: str,
        level_title: str,
) -> ImportResult:
    """
    Load a flat CSV (`order,korean,translation,chapter`) into one level.

    The language is matched by key and the level by title; both are created
    when missing. Chapters are created on demand by the import.
    """
    language = crud_language.get_by_key(db, key=language_key)
    if language is None:
        language = crud_language.create(db, obj_in={"key": language_key, "value": language_value, "order": 0})
        logger.info(f"Created language '{language_key}'")
    level = crud_level.get_by_title(db, language_id=language.id, title=level_title)
    if level is None:
        level = crud_level.create(db, obj_in={"language_id": language.id, "title": level_title, "order": 0})
        logger.info(f"Created level '{level_title}'")

    result = CatalogService(db).load_flat_csv(level, csv_text)
    if result.errors:
        db.rollback()
    return result
