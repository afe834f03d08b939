"""Response envelope shared by every endpoint."""

from datetime import datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """``{success, data?, error?, message?}``"""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: list[dict[str, Any]] | None = None
    request_id: str | None = None


class HealthResponse(BaseModel):
    success: bool = True
    status: str
    timestamp: datetime | None = None
    error: str | None = None
