"""
Translate service results into HTTP responses
"""

from typing import Any

from fastapi import HTTPException, status

from teachflow.services.base import ActionResult

STATUS_BY_CODE = {
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation_error": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "already_exists": status.HTTP_400_BAD_REQUEST,
    "reference_conflict": status.HTTP_409_CONFLICT,
    "persistence_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: ActionResult) -> Any:
    """Return the payload of a successful result or raise the matching HTTP error"""
    if result.success:
        return result.data
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(result.code, status.HTTP_400_BAD_REQUEST),
        detail=result.error,
    )
