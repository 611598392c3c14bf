"""Application error definitions and FastAPI handlers."""

import logging
from typing import Iterable, List, NamedTuple

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class FieldError(NamedTuple):
    field: str
    message: str


class AppException(Exception):
    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST, code: str = "error"):
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NotFoundException(AppException):
    def __init__(self, message: str = "Record not found"):
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND, code="not_found")


class ValidationAppException(AppException):
    def __init__(self, message: str = "Invalid data"):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, code="validation_error")


class InventoryValidationError(ValidationAppException):
    """Every rule a candidate part or product broke, in check order."""

    def __init__(self, errors: Iterable[FieldError]):
        self.errors: List[FieldError] = list(errors)
        super().__init__(", ".join(err.message for err in self.errors) or "Validation failed")


class InvalidIdException(AppException):
    def __init__(self, message: str = "Invalid ID format"):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, code="invalid_id")


class IntegrityViolation(AppException):
    def __init__(self, message: str = "Cannot delete a product with associated parts"):
        super().__init__(message=message, status_code=status.HTTP_400_BAD_REQUEST, code="integrity_violation")


class ConflictException(AppException):
    def __init__(self, message: str = "Record was modified concurrently"):
        super().__init__(message=message, status_code=status.HTTP_409_CONFLICT, code="conflict")


class StorageException(AppException):
    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message=message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, code="storage_error")


class AuthenticationException(AppException):
    def __init__(self, message: str = "Not authorized"):
        super().__init__(message=message, status_code=status.HTTP_401_UNAUTHORIZED, code="not_authorized")


def _format_error(detail: str, code: str):
    return {"message": detail, "code": code}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        content = _format_error(exc.message, exc.code)
        if isinstance(exc, InventoryValidationError):
            content["errors"] = [err._asdict() for err in exc.errors]
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationException) else None
        return JSONResponse(status_code=exc.status_code, content=content, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Request data could not be validated", "validation_error"),
        )

    @app.exception_handler(ValidationError)
    async def pydantic_validation_handler(request: Request, exc: ValidationError):
        logger.error("Response serialization failed for %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_format_error("Request data could not be validated", "validation_error"),
        )
