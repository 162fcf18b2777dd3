from pydantic import BaseModel
from typing import Generic, TypeVar, Optional

T = TypeVar('T')
class StandardResponse(BaseModel, Generic[T]):
    """Standard response envelope

    Every endpoint returns this shape; errors use the same envelope with
    `data` set to null.

    Attributes:
        code: status code, 200 on success
        message: 'success' or a plain error message
        data: payload
    """
    code: int = 200
    message: str = 'success'
    data: Optional[T] = None
