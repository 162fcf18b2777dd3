from sqlalchemy import Column, Integer, String, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime, UTC
from wordbook.db.base_class import Base
from wordbook.db.types import UTCDateTime

class User(Base):
    """User model

    Learners are identified by phone number; `is_admin` is derived from the
    configured admin phone every time the user is created or updated.

    Attributes:
        id: autoincrement ID
        name: display name
        phone: unique phone number
        is_admin: may mutate the content catalog
        created_at: creation time
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    phone = Column(String, unique=True, index=True, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(UTC))

    progress = relationship("WordProgress", back_populates="user", cascade="all, delete-orphan")
    stat = relationship("UserStat", back_populates="user", uselist=False, cascade="all, delete-orphan")
    learning_settings = relationship(
        "LearningSettings", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
