"""
Error taxonomy shared by all routers.

Every class is an HTTPException with a fixed status code, so a handler
raises the error and FastAPI renders {"detail": "..."}.
"""

from typing import Optional

from fastapi import HTTPException, status


class ApiError(HTTPException):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input"


class AuthError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Unauthorized"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(ApiError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


class StoreError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Database error"
