"""
Error taxonomy shared by services and routers.

Services raise these; create_app() registers handlers that turn every one of
them into ``{"error": <message>}`` with the matching HTTP status.
"""

from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code = 500
    default_message = "internal_error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class AuthError(AppError):
    """Missing, invalid or expired credential. The caller must re-authenticate."""
    status_code = 401
    default_message = "invalid_credentials"


class ForbiddenError(AppError):
    """Authenticated, but not allowed to touch the target patient."""
    status_code = 403
    default_message = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "not_found"


class ConflictError(AppError):
    status_code = 409
    default_message = "conflict"


class InvalidRequestError(AppError):
    """The request is well-formed but does not match current pairing state."""
    status_code = 400
    default_message = "invalid_request"


class ValidationError(AppError):
    status_code = 400
    default_message = "validation_error"


class StoreError(AppError):
    status_code = 500
    default_message = "store_error"


def _error_response(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return _error_response(exc.status_code, exc.message, headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # 첫 번째 오류만 사람이 읽을 수 있게 정리
    errors = exc.errors()
    if errors:
        first = errors[0]
        loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{loc}: {first.get('msg')}" if loc else first.get("msg", "")
    else:
        message = ValidationError.default_message
    return _error_response(ValidationError.status_code, message)


async def http_exception_handler(request: Request, exc: HTTPException):
    return _error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _error_response(StoreError.status_code, StoreError.default_message)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
