# =============================================================================
# core/response.py - Uniform API Response Envelope
# =============================================================================
# Every JSON result the API returns is wrapped in the same shape:
#
#   {"code": 0, "msg": "Success", "data": {...}, "timestamp": "..."}
#
# `code` is a business code, not an HTTP status:
#   0            success
#   1            generic failure
#   10000-10099  cache (Redis) errors
#   10100-10199  database errors
#   10200-10299  configuration errors
#   10300-10399  system errors (I/O, serialization, internal)
#   11000-11099  input validation errors
#   11100-11199  file upload errors
#   11200-11299  other business errors
# =============================================================================

from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorCode(IntEnum):
    """Business error codes, grouped by range."""
    SUCCESS = 0
    FAIL = 1

    CACHE = 10000

    DATABASE = 10100

    CONFIG = 10200
    CONFIG_MISSING_VAR = 10201
    CONFIG_INVALID_VALUE = 10202
    CONFIG_FILE = 10203
    CONFIG_INVALID = 10204

    SYSTEM = 10300
    IO = 10301
    SERIALIZATION = 10302
    INTERNAL = 10399

    VALIDATION = 11000

    FILE_UPLOAD = 11100
    FILE_TOO_LARGE = 11101
    FILE_TYPE_NOT_ALLOWED = 11102
    UPLOAD_FAILED = 11103
    MISSING_FIELD = 11104

    BUSINESS = 11200


def _now() -> str:
    """RFC 3339 timestamp in UTC."""
    return datetime.now(timezone.utc).isoformat()


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope wrapped around every API result.

    Build it through the constructors rather than directly:

        ApiResponse.success({"id": 1})
        ApiResponse.error(ErrorCode.VALIDATION, "name is required")
    """

    code: int = Field(..., description="Business status code, 0 means success")
    msg: str = Field(..., description="Human-readable message")
    data: T | None = Field(default=None, description="Payload; null on errors")
    timestamp: str = Field(default_factory=_now, description="RFC 3339 creation time")

    @classmethod
    def success(cls, data: Any, msg: str = "Success") -> "ApiResponse":
        return cls(code=int(ErrorCode.SUCCESS), msg=msg, data=data)

    @classmethod
    def error(cls, code: int, msg: str) -> "ApiResponse":
        """
        Error envelope. `data` is always None.

        Raises:
            ValueError: if code is 0, which is reserved for success
        """
        if int(code) == ErrorCode.SUCCESS:
            raise ValueError("Error responses need a non-zero code")
        return cls(code=int(code), msg=msg, data=None)

    @classmethod
    def fail(cls, msg: str) -> "ApiResponse":
        return cls.error(ErrorCode.FAIL, msg)

    @property
    def is_success(self) -> bool:
        return self.code == ErrorCode.SUCCESS
