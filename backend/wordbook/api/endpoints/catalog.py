from typing import List, Optional
from fastapi import APIRouter, Depends, Header

from wordbook.config.dependency_injection import get_catalog_service
from wordbook.schemas import catalog as schemas
from wordbook.schemas.response import StandardResponse
from wordbook.services.catalog_service import CatalogService

router = APIRouter()


def acting_user_id(x_user_id: Optional[int] = Header(None)) -> Optional[int]:
    """ID of the user performing a mutation; the admin flag is checked by the service"""
    return x_user_id


# --- Reads ---

@router.get("/languages", response_model=StandardResponse[List[schemas.Language]])
def list_languages(service: CatalogService = Depends(get_catalog_service)):
    return StandardResponse(data=[schemas.Language.model_validate(x) for x in service.list_languages()])


@router.get("/languages/{language_id}/levels", response_model=StandardResponse[List[schemas.Level]])
def list_levels(language_id: int, service: CatalogService = Depends(get_catalog_service)):
    return StandardResponse(data=[schemas.Level.model_validate(x) for x in service.list_levels(language_id)])


@router.get("/levels/{level_id}/chapters", response_model=StandardResponse[List[schemas.Chapter]])
def list_chapters(level_id: int, service: CatalogService = Depends(get_catalog_service)):
    return StandardResponse(data=[schemas.Chapter.model_validate(x) for x in service.list_chapters(level_id)])


@router.get("/chapters/{chapter_id}/words", response_model=StandardResponse[List[schemas.Word]])
def list_words(chapter_id: int, service: CatalogService = Depends(get_catalog_service)):
    return StandardResponse(data=[schemas.Word.model_validate(x) for x in service.list_words(chapter_id)])


@router.get("/tree", response_model=StandardResponse[List[schemas.CatalogLanguage]])
def get_catalog_tree(service: CatalogService = Depends(get_catalog_service)):
    """
    The whole catalog: languages with their levels, chapters and words, each ordered
    """
    return StandardResponse(data=[schemas.CatalogLanguage.model_validate(x) for x in service.get_tree()])


# --- Languages ---

@router.post("/languages", response_model=StandardResponse[schemas.Language])
def create_language(
        language_in: schemas.LanguageCreate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=schemas.Language.model_validate(service.create_language(user_id, language_in)))


@router.put("/languages/{language_id}", response_model=StandardResponse[schemas.Language])
def update_language(
        language_id: int,
        language_in: schemas.LanguageUpdate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    language = service.update_language(user_id, language_id, language_in)
    return StandardResponse(data=schemas.Language.model_validate(language))


@router.delete("/languages/{language_id}", response_model=StandardResponse[bool])
def delete_language(
        language_id: int,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=service.delete_language(user_id, language_id))


# --- Levels ---

@router.post("/languages/{language_id}/levels", response_model=StandardResponse[schemas.Level])
def create_level(
        language_id: int,
        level_in: schemas.LevelCreate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=schemas.Level.model_validate(service.create_level(user_id, language_id, level_in)))


@router.put("/levels/{level_id}", response_model=StandardResponse[schemas.Level])
def update_level(
        level_id: int,
        level_in: schemas.LevelUpdate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=schemas.Level.model_validate(service.update_level(user_id, level_id, level_in)))


@router.delete("/levels/{level_id}", response_model=StandardResponse[bool])
def delete_level(
        level_id: int,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=service.delete_level(user_id, level_id))


# --- Chapters ---

@router.post("/levels/{level_id}/chapters", response_model=StandardResponse[schemas.Chapter])
def create_chapter(
        level_id: int,
        chapter_in: schemas.ChapterCreate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    chapter = service.create_chapter(user_id, level_id, chapter_in)
    return StandardResponse(data=schemas.Chapter.model_validate(chapter))


@router.put("/chapters/{chapter_id}", response_model=StandardResponse[schemas.Chapter])
def update_chapter(
        chapter_id: int,
        chapter_in: schemas.ChapterUpdate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    chapter = service.update_chapter(user_id, chapter_id, chapter_in)
    return StandardResponse(data=schemas.Chapter.model_validate(chapter))


@router.delete("/chapters/{chapter_id}", response_model=StandardResponse[bool])
def delete_chapter(
        chapter_id: int,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=service.delete_chapter(user_id, chapter_id))


# --- Words ---

@router.post("/chapters/{chapter_id}/words", response_model=StandardResponse[schemas.Word])
def create_word(
        chapter_id: int,
        word_in: schemas.WordCreate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=schemas.Word.model_validate(service.create_word(user_id, chapter_id, word_in)))


@router.put("/words/{word_id}", response_model=StandardResponse[schemas.Word])
def update_word(
        word_id: int,
        word_in: schemas.WordUpdate,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=schemas.Word.model_validate(service.update_word(user_id, word_id, word_in)))


@router.delete("/words/{word_id}", response_model=StandardResponse[bool])
def delete_word(
        word_id: int,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=service.delete_word(user_id, word_id))


# --- CSV imports ---

@router.post("/chapters/{chapter_id}/import", response_model=StandardResponse[schemas.ImportResult])
def import_words(
        chapter_id: int,
        import_in: schemas.ImportRequest,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    """
    Import words into a chapter from CSV with the header `order,korean,translation`

    CSV problems do not fail the request: they are reported in `errors` with nothing inserted.
    """
    return StandardResponse(data=service.import_words(user_id, chapter_id, import_in.csv))


@router.post("/levels/{level_id}/import", response_model=StandardResponse[schemas.ImportResult])
def import_words_flat(
        level_id: int,
        import_in: schemas.ImportRequest,
        user_id: Optional[int] = Depends(acting_user_id),
        service: CatalogService = Depends(get_catalog_service),
):
    return StandardResponse(data=service.import_words_flat(user_id, level_id, import_in.csv))
