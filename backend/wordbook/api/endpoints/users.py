from typing import Optional
from fastapi import APIRouter, Depends, Query

from wordbook.config.dependency_injection import get_study_service, get_user_service
from wordbook.schemas.response import StandardResponse
from wordbook.schemas.user import (
    LearningSettings, LearningSettingsUpdate, User, UserUpdate, UserUpsert,
)
from wordbook.services.study_service import StudyService
from wordbook.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=StandardResponse[User])
def upsert_user(user_in: UserUpsert, service: UserService = Depends(get_user_service)):
    """
    Create a user, or update the name of the user with the same phone

    Args:
        user_in: name and phone
        service: user service

    Returns:
        StandardResponse[User]: the stored user with its admin flag
    """
    user = service.upsert_user(user_in)
    return StandardResponse(data=User.model_validate(user))


@router.get("/lookup", response_model=StandardResponse[User])
def lookup_user(
        user_id: Optional[int] = Query(None),
        phone: Optional[str] = Query(None),
        service: UserService = Depends(get_user_service),
):
    user = service.get_user(user_id=user_id, phone=phone)
    return StandardResponse(data=User.model_validate(user))


@router.get("/{user_id}", response_model=StandardResponse[User])
def get_user(user_id: int, service: UserService = Depends(get_user_service)):
    return StandardResponse(data=User.model_validate(service.get_user(user_id=user_id)))


@router.put("/{user_id}", response_model=StandardResponse[User])
def update_user(user_id: int, user_in: UserUpdate, service: UserService = Depends(get_user_service)):
    return StandardResponse(data=User.model_validate(service.update_user(user_id, user_in)))


@router.delete("/{user_id}", response_model=StandardResponse[bool])
def delete_user(user_id: int, service: UserService = Depends(get_user_service)):
    return StandardResponse(data=service.delete_user(user_id))


@router.post("/{user_id}/clear-words", response_model=StandardResponse[bool])
def clear_words(user_id: int, service: StudyService = Depends(get_study_service)):
    """
    Forget all studied words of the user and reset the user's counters
    """
    return StandardResponse(data=service.clear_words(user_id))


@router.get("/{user_id}/learning-settings", response_model=StandardResponse[LearningSettings])
def get_learning_settings(user_id: int, service: UserService = Depends(get_user_service)):
    record = service.get_learning_settings(user_id)
    return StandardResponse(data=LearningSettings.model_validate(record))


@router.put("/{user_id}/learning-settings", response_model=StandardResponse[LearningSettings])
def update_learning_settings(
        user_id: int,
        settings_in: LearningSettingsUpdate,
        service: UserService = Depends(get_user_service),
):
    record = service.update_learning_settings(user_id, settings_in)
    return StandardResponse(data=LearningSettings.model_validate(record))
