from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class UserUpsert(BaseModel):
    """Create-or-update request: users are matched by phone number."""
    name: str = Field(..., min_length=1, description="Display name")
    phone: str = Field(..., min_length=1, description="Phone number, unique per user")


class UserUpdate(UserUpsert):
    pass


class User(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    is_admin: bool


class LearningSettingsUpdate(BaseModel):
    """Only the provided fields are changed."""
    learn_session_size: Optional[int] = Field(None, gt=0)
    review_session_size: Optional[int] = Field(None, gt=0)
    speed_review_session_size: Optional[int] = Field(None, gt=0)
    enable_typing: Optional[bool] = None
    enable_tapping: Optional[bool] = None
    enable_listening: Optional[bool] = None


class LearningSettings(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    learn_session_size: int
    review_session_size: int
    speed_review_session_size: int
    enable_typing: bool
    enable_tapping: bool
    enable_listening: bool
