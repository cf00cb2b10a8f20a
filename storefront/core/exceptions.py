"""
Global exception handling for the application.
Every failure is rendered in the API envelope: {success, message, error, details?}.
"""

import traceback
from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from storefront.config import get_settings

logger = structlog.get_logger(__name__)

BEARER_CHALLENGE = {"WWW-Authenticate": "Bearer"}


class AppError(Exception):
    """Base class for all application exceptions."""

    code = "InternalError"

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.headers = headers
        super().__init__(self.message)


class ValidationException(AppError):
    """Malformed or missing input."""
    code = "ValidationError"

    def __init__(self, message: str = "Error de validación", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    code = "Unauthorized"

    def __init__(self, message: str = "No autorizado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details, headers=BEARER_CHALLENGE)


class MissingCredentialsException(UnauthorizedException):
    code = "MissingCredentials"

    def __init__(self, message: str = "Token de acceso requerido", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidTokenException(UnauthorizedException):
    code = "InvalidToken"

    def __init__(self, message: str = "Token inválido", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class TokenExpiredException(UnauthorizedException):
    code = "TokenExpired"

    def __init__(self, message: str = "Token expirado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class AccountInactiveException(UnauthorizedException):
    code = "AccountInactive"

    def __init__(self, message: str = "Cuenta desactivada", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class InvalidCredentialsException(UnauthorizedException):
    """Login failure. The message never reveals whether the email exists."""
    code = "InvalidCredentials"

    def __init__(self, message: str = "Credenciales inválidas", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)


class ForbiddenException(AppError):
    """Authorization failure error."""
    code = "Forbidden"

    def __init__(self, message: str = "Acceso denegado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    code = "NotFound"

    def __init__(self, message: str = "Recurso no encontrado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class GoneException(AppError):
    """Resource exists but was soft-deleted."""
    code = "Gone"

    def __init__(self, message: str = "Recurso no disponible", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_410_GONE, details)


class DuplicateEmailException(AppError):
    code = "DuplicateEmail"

    def __init__(self, message: str = "El email ya está registrado", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class DuplicateCategoryException(AppError):
    code = "DuplicateCategory"

    def __init__(self, message: str = "La categoría ya existe", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


def _error_body(message: str, code: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message, "error": code}
    if details:
        body["details"] = details
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.code, exc.details),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request body/query/path validation failures are client errors (400)."""
    errors = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        errors.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body("Error de validación", ValidationException.code, {"errors": errors}),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Ruta {request.url.path} no encontrada"
        code = EntityNotFoundException.code
    else:
        message = str(exc.detail)
        code = "HTTPError"

    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message, code),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        return await app_error_handler(request, exc)

    logger.exception("Unhandled error", path=request.url.path, error=str(exc))

    body = _error_body("Error interno del servidor", AppError.code)
    if not get_settings().is_production:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
