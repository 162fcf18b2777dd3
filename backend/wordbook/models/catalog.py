from sqlalchemy import Column, Integer, String, Text, ForeignKey, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, UTC
from wordbook.db.base_class import Base
from wordbook.db.types import UTCDateTime


class Language(Base):
    """Language model

    Root of the content hierarchy Language -> Level -> Chapter -> Word.

    Attributes:
        id: autoincrement ID
        key: optional unique key (e.g. "Korean_Language")
        value: display name, possibly a JSON-encoded localized map
        description: optional free text
        order: position among languages
        created_at: creation time
    """
    __tablename__ = "languages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    key = Column(String, unique=True, nullable=True)
    value = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = Column(UTCDateTime, default=lambda: datetime.now(UTC))

    levels = relationship(
        "Level", back_populates="language", cascade="all, delete-orphan",
        order_by=lambda: [Level.order, Level.id]
    )


class Level(Base):
    __tablename__ = "levels"
    __table_args__ = (UniqueConstraint("language_id", "title", name="uq_level_language_title"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    language_id = Column(Integer, ForeignKey("languages.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=0)

    language = relationship("Language", back_populates="levels")
    chapters = relationship(
        "Chapter", back_populates="level", cascade="all, delete-orphan",
        order_by=lambda: [Chapter.order, Chapter.id]
    )


class Chapter(Base):
    __tablename__ = "chapters"
    __table_args__ = (UniqueConstraint("level_id", "title", name="uq_chapter_level_title"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    level_id = Column(Integer, ForeignKey("levels.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String, nullable=False)
    order = Column(Integer, nullable=False, default=0)

    level = relationship("Level", back_populates="chapters")
    words = relationship(
        "Word", back_populates="chapter", cascade="all, delete-orphan",
        order_by=lambda: [Word.order, Word.id]
    )


class Word(Base):
    """Word model

    The unit a learner studies.

    Attributes:
        id: autoincrement ID
        chapter_id: owning chapter
        korean: source-language text
        translation: localized map {"en", "ru", "uz"}
        order: position inside the chapter
        audio: optional audio reference
    """
    __tablename__ = "words"
    # (chapter_id, korean, order) is the duplicate key used by the CSV import
    __table_args__ = (UniqueConstraint("chapter_id", "korean", "order", name="uq_word_chapter_korean_order"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    chapter_id = Column(Integer, ForeignKey("chapters.id", ondelete="CASCADE"), index=True, nullable=False)
    korean = Column(String, nullable=False)
    translation = Column(JSON, nullable=False)
    order = Column(Integer, nullable=False, default=0)
    audio = Column(String, nullable=True)

    chapter = relationship("Chapter", back_populates="words")
    progress = relationship("WordProgress", back_populates="word", cascade="all, delete-orphan")
