from typing import Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by every endpoint: {"success": true, "data": ...}"""

    success: bool = True
    data: T


class ErrorResponse(BaseModel):
    """Error envelope rendered by the exception handlers"""

    success: bool = False
    error: str


class MessagePayload(BaseModel):
    message: str
