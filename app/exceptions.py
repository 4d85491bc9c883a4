# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized error taxonomy for the API.
#
# Configuration errors are fatal at startup. Everything else is raised from
# request handling and converted to the response envelope at the HTTP
# boundary, so a failing request never takes the process down.
# =============================================================================

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.routers.not_found import render_not_found
from core.response import ApiResponse, ErrorCode

logger = logging.getLogger(__name__)


class AppError(Exception):
    """
    Base exception for the API.

    All custom exceptions inherit from this class. Server-side failures
    (status >= 500) hide their message behind `public_message` so internals
    never leak into responses; client errors show the message as-is.
    """

    public_message = "Internal server error"

    def __init__(
        self,
        message: str,
        code: int = ErrorCode.SYSTEM,
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = int(code)
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = self.message
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    @property
    def response_message(self) -> str:
        """Message placed in the envelope."""
        if self.status_code >= 500:
            return self.public_message
        return self.message

    def to_response(self) -> ApiResponse:
        return ApiResponse.error(self.code, self.response_message)


# =============================================================================
# Configuration Exceptions
# =============================================================================

class ConfigError(AppError):
    """Configuration could not be resolved. Always fatal at startup."""

    public_message = "Configuration error"

    def __init__(self, message: str, code: int = ErrorCode.CONFIG, **kwargs: Any):
        super().__init__(message=message, code=code, status_code=500, **kwargs)


class MissingVarError(ConfigError):
    """Raised when a required environment variable is missing or empty."""

    def __init__(self, var_name: str):
        super().__init__(
            message=f"Missing required environment variable: {var_name}",
            code=ErrorCode.CONFIG_MISSING_VAR,
            suggestion=f"Set {var_name} in the environment or in your .env file",
            details={"var_name": var_name},
        )
        self.var_name = var_name


class InvalidValueError(ConfigError):
    """Raised when a single configuration value is out of range."""

    def __init__(self, var_name: str, value: Any):
        super().__init__(
            message=f"Invalid value for {var_name}: {value}",
            code=ErrorCode.CONFIG_INVALID_VALUE,
            details={"var_name": var_name, "value": value},
        )
        self.var_name = var_name
        self.value = value


class ConfigFileError(ConfigError):
    """Raised when the config file exists but can't be read or parsed."""

    def __init__(self, path: str, error: str):
        super().__init__(
            message=f"Configuration file error: {path}: {error}",
            code=ErrorCode.CONFIG_FILE,
            suggestion="Fix the TOML syntax or remove the file to use defaults",
            details={"path": path, "error": error},
        )


class InvalidConfigError(ConfigError):
    """Raised when a section fails its semantic checks."""

    def __init__(self, message: str, section: str | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.CONFIG_INVALID,
            details={"section": section} if section else None,
        )
        self.section = section


# =============================================================================
# Infrastructure Exceptions
# =============================================================================

class DatabaseError(AppError):
    """Raised when the database can't be reached or a query fails."""

    public_message = "Database error"

    def __init__(self, error: str):
        super().__init__(
            message=f"Database error: {error}",
            code=ErrorCode.DATABASE,
            status_code=500,
            suggestion="Check DATABASE_URL and that the database is reachable",
            details={"error": error},
        )


class CacheError(AppError):
    """Raised when the Redis cache fails."""

    public_message = "Cache error"

    def __init__(self, error: str):
        super().__init__(
            message=f"Cache error: {error}",
            code=ErrorCode.CACHE,
            status_code=500,
            suggestion="Check REDIS_URL and that Redis is reachable",
            details={"error": error},
        )


class IoError(AppError):
    """Raised on filesystem or socket failures."""

    public_message = "IO error"

    def __init__(self, error: str):
        super().__init__(
            message=f"IO error: {error}",
            code=ErrorCode.IO,
            status_code=500,
            details={"error": error},
        )


class SerializationError(AppError):
    """Raised when a payload can't be encoded or decoded."""

    def __init__(self, error: str):
        super().__init__(
            message="Invalid data format",
            code=ErrorCode.SERIALIZATION,
            status_code=400,
            details={"error": error},
        )


# =============================================================================
# Request Exceptions
# =============================================================================

class InputValidationError(AppError):
    """Raised when user input fails business validation."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message=message,
            code=ErrorCode.VALIDATION,
            status_code=400,
            details={"field": field} if field else None,
        )


class HttpRequestError(AppError):
    """Raised to answer with a bare HTTP status."""

    def __init__(self, status_code: int):
        super().__init__(
            message="Request error",
            code=ErrorCode.BUSINESS,
            status_code=status_code,
        )


# =============================================================================
# Upload Exceptions
# =============================================================================

class FileUploadError(AppError):
    """Base class for file upload failures."""

    public_message = "File upload error"

    def __init__(self, message: str, code: int = ErrorCode.FILE_UPLOAD, status_code: int = 400, **kwargs: Any):
        super().__init__(message=message, code=code, status_code=status_code, **kwargs)


class FileTooLargeError(FileUploadError):
    """Raised when an uploaded file exceeds the size limit."""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            message=f"File size exceeds the limit: {size} bytes (max: {max_size} bytes)",
            code=ErrorCode.FILE_TOO_LARGE,
            status_code=413,
            suggestion=f"Upload a file smaller than {max_size} bytes",
            details={"size": size, "max_size": max_size},
        )


class InvalidFileTypeError(FileUploadError):
    """Raised when an uploaded file type is not allowed."""

    def __init__(self, filename: str, allowed: list[str]):
        super().__init__(
            message=f"File type not allowed: {filename}",
            code=ErrorCode.FILE_TYPE_NOT_ALLOWED,
            suggestion=f"Only these file types are supported: {', '.join(allowed)}",
            details={"filename": filename, "allowed_types": allowed},
        )


class UploadFailedError(FileUploadError):
    """Raised when storing an upload fails."""

    def __init__(self, error: str):
        super().__init__(
            message=f"File upload failed: {error}",
            code=ErrorCode.UPLOAD_FAILED,
            status_code=500,
            suggestion="Try again later or contact support if the issue persists",
            details={"error": error},
        )


class MissingFieldError(FileUploadError):
    """Raised when a multipart form is missing a required field."""

    def __init__(self, field: str):
        super().__init__(
            message=f"Missing required field: {field}",
            code=ErrorCode.MISSING_FIELD,
            details={"field": field},
        )


# =============================================================================
# Exception Handlers
# =============================================================================

def envelope_response(status_code: int, body: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    """Convert AppError to an error envelope with the error's status code."""
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return envelope_response(exc.status_code, exc.to_response())


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request body/query validation errors.

    Folds the pydantic errors into one readable message.
    """
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        problems.append(f"{location}: {error.get('msg', 'invalid')}")
    message = "Validation error"
    if problems:
        message += ": " + "; ".join(problems)
    return envelope_response(422, ApiResponse.error(ErrorCode.VALIDATION, message))


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> Response:
    """
    Handle framework HTTP errors.

    404s render the HTML not-found page; anything else becomes an envelope
    whose code is the HTTP status.
    """
    if exc.status_code == 404:
        return render_not_found(request)

    message = exc.detail if isinstance(exc.detail, str) else "Request error"
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiResponse.error(exc.status_code, message).model_dump(mode="json"),
        headers=getattr(exc, "headers", None),
    )
