from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from wordbook.config.dependency_injection import get_study_service
from wordbook.core.exceptions import ValidationError
from wordbook.db.types import fits_db_int
from wordbook.schemas.catalog import Word
from wordbook.schemas.response import StandardResponse
from wordbook.schemas.study import AnswerBatch, AnswerInput, UserStatSummary, WordProgress, WordStat
from wordbook.services.study_service import StudyService

router = APIRouter()


def parse_chapter_ids(chapter_ids: str = Query("", description="Comma-separated chapter IDs")) -> List[int]:
    try:
        ids = [int(part) for part in chapter_ids.split(",") if part.strip()]
    except ValueError:
        raise ValidationError(f"Invalid chapter_ids: '{chapter_ids}'.")
    if not all(fits_db_int(chapter_id) for chapter_id in ids):
        raise ValidationError(f"Invalid chapter_ids: '{chapter_ids}'.")
    return ids


@router.get("/users/{user_id}/session-words", response_model=StandardResponse[List[Word]])
def get_session_words(
        user_id: int,
        chapter_ids: List[int] = Depends(parse_chapter_ids),
        limit: Optional[int] = Query(None),
        service: StudyService = Depends(get_study_service),
):
    """
    Words of the selected chapters the user has not learned yet

    Args:
        user_id: learner ID
        chapter_ids: comma-separated chapter IDs
        limit: optional maximum number of words
        service: study service

    Returns:
        StandardResponse[List[Word]]: words ordered by `order`, then ID
    """
    words = service.select_session_words(user_id, chapter_ids, limit)
    return StandardResponse(data=[Word.model_validate(word) for word in words])


@router.post("/users/{user_id}/answers", response_model=StandardResponse[WordStat])
def record_answer(user_id: int, answer: AnswerInput, service: StudyService = Depends(get_study_service)):
    return StandardResponse(data=service.record_answer(user_id, answer.word_id, answer.correct))


@router.post("/users/{user_id}/answers/batch", response_model=StandardResponse[bool])
def record_answers(user_id: int, batch: AnswerBatch, service: StudyService = Depends(get_study_service)):
    return StandardResponse(data=service.record_answers(user_id, batch.answers))


@router.get("/users/{user_id}/words/{word_id}/progress", response_model=StandardResponse[WordProgress])
def get_word_progress(user_id: int, word_id: int, service: StudyService = Depends(get_study_service)):
    return StandardResponse(data=service.get_word_progress(user_id, word_id))


@router.post("/users/{user_id}/complete-session", response_model=StandardResponse[UserStatSummary])
def complete_session(user_id: int, service: StudyService = Depends(get_study_service)):
    return StandardResponse(data=service.complete_session(user_id))


@router.get("/users/{user_id}/stats", response_model=StandardResponse[UserStatSummary])
def get_stats(user_id: int, service: StudyService = Depends(get_study_service)):
    return StandardResponse(data=service.get_stats(user_id))
