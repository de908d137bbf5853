from typing import Generic, TypeVar

from fastapi import HTTPException, status
from pydantic import BaseModel

from application.dtos.errors import AppError

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope shared by all ``/api`` routes."""

    success: bool = True
    data: T


_STATUS_BY_CATEGORY = {
    "validation": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "unavailable": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "storage_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _map_app_error_to_http_exception(error: AppError) -> HTTPException:
    """Map application layer errors to appropriate HTTP exceptions."""
    status_code = _STATUS_BY_CATEGORY.get(error.category)
    if status_code is not None:
        return HTTPException(status_code=status_code, detail=error.message)
    # Unknown error category
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=error.message or "Internal server error",
    )
