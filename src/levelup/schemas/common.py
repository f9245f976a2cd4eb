"""Uniform result envelope shared by the service layer and the API."""

import enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ErrorKind(str, enum.Enum):
    """Failure classification carried alongside the message."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    RULE_VIOLATION = "rule_violation"
    PARTIAL_FAILURE = "partial_failure"
    INVALID_CREDENTIALS = "invalid_credentials"
    STORAGE = "storage"
    IN_FLIGHT = "in_flight"


GENERIC_ERROR_MESSAGE = "An error occurred."


class ServiceResult(BaseModel, Generic[DataT]):
    """``{success, message, data?}`` shape returned by every operation."""

    success: bool
    message: str
    error: Optional[ErrorKind] = None
    data: Optional[DataT] = None
    status_code: int = Field(default=200, exclude=True)

    @classmethod
    def ok(cls, message: str = "", data=None, status_code: int = 200):
        return cls(success=True, message=message, data=data, status_code=status_code)

    @classmethod
    def fail(cls, message: str, error: ErrorKind, status_code: int = 400, data=None):
        return cls(success=False, message=message, error=error, data=data, status_code=status_code)
