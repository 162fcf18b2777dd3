import json
from pydantic import BaseModel, ConfigDict, Field, model_validator
from typing import Any, Dict, List, Optional, Union

TRANSLATION_KEYS = ("en", "ru", "uz")


def normalize_translations(value: Any) -> Dict[str, Optional[str]]:
    """
    Normalize a stored or submitted translation into {"en", "ru", "uz"}.

    A plain string becomes the English text, a string holding a JSON object is
    decoded, and a mapping is projected onto the three known keys.
    """
    if not value:
        return {"en": "", "ru": None, "uz": None}
    if isinstance(value, str):
        trimmed = value.strip()
        if trimmed.startswith("{") and trimmed.endswith("}"):
            try:
                parsed = json.loads(trimmed)
            except ValueError:
                return {"en": value, "ru": None, "uz": None}
            if isinstance(parsed, dict):
                return normalize_translations(parsed)
        return {"en": value, "ru": None, "uz": None}
    if isinstance(value, dict):
        return {
            "en": value.get("en") or "",
            "ru": value.get("ru"),
            "uz": value.get("uz"),
        }
    return {"en": str(value), "ru": None, "uz": None}


class Translations(BaseModel):
    en: Optional[str] = None
    ru: Optional[str] = None
    uz: Optional[str] = None


# --- Language ---

class LanguageCreate(BaseModel):
    key: Optional[str] = Field(None, description="Unique language key, e.g. 'Korean_Language'")
    value: str = Field(..., min_length=1, description="Display name, possibly a JSON-encoded localized map")
    description: Optional[str] = None
    order: Optional[int] = None


class LanguageUpdate(BaseModel):
    key: Optional[str] = None
    value: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    order: Optional[int] = None


class Language(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    key: Optional[str] = None
    value: str
    description: Optional[str] = None
    order: int


# --- Level ---

class LevelCreate(BaseModel):
    title: str = Field(..., min_length=1)
    order: Optional[int] = None


class LevelUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    order: Optional[int] = None


class Level(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    language_id: int
    title: str
    order: int


# --- Chapter ---

class ChapterCreate(BaseModel):
    title: str = Field(..., min_length=1)
    order: Optional[int] = None


class ChapterUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    order: Optional[int] = None


class Chapter(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    level_id: int
    title: str
    order: int


# --- Word ---

class WordCreate(BaseModel):
    korean: str = Field(..., min_length=1)
    translation: Union[str, Translations] = Field(..., description="English text or a localized map")
    order: Optional[int] = None
    audio: Optional[str] = None


class WordUpdate(BaseModel):
    korean: Optional[str] = Field(None, min_length=1)
    translation: Optional[Union[str, Translations]] = None
    order: Optional[int] = None
    audio: Optional[str] = None


class Word(BaseModel):
    """Word as returned to clients: `translation` is the English text, `translations` the full map."""
    id: int
    chapter_id: int
    korean: str
    translation: str
    translations: Translations
    order: int
    audio: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _from_model(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        translations = normalize_translations(data.translation)
        return {
            "id": data.id,
            "chapter_id": data.chapter_id,
            "korean": data.korean,
            "translation": translations["en"] or "",
            "translations": translations,
            "order": data.order,
            "audio": data.audio,
        }


# --- Catalog tree ---

class CatalogChapter(Chapter):
    words: List[Word] = []


class CatalogLevel(Level):
    chapters: List[CatalogChapter] = []


class CatalogLanguage(Language):
    levels: List[CatalogLevel] = []


# --- CSV import ---

class ImportRequest(BaseModel):
    csv: str = Field(..., description="Raw CSV text including the header row")


class ImportResult(BaseModel):
    inserted: int = 0
    skipped: int = 0
    errors: List[str] = []
