from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from fastapi import status


class ServiceErrorType(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_ERROR = "DUPLICATE_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    NOT_FOUND_ERROR = "NOT_FOUND_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


STATUS_BY_TYPE = {
    ServiceErrorType.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ServiceErrorType.DUPLICATE_ERROR: status.HTTP_409_CONFLICT,
    ServiceErrorType.NOT_FOUND_ERROR: status.HTTP_404_NOT_FOUND,
    ServiceErrorType.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ServiceErrorType.UNKNOWN_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Failure raised by the service layer, rendered to JSON by the app."""

    def __init__(
        self,
        message: str,
        error_type: ServiceErrorType,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.type = error_type
        self.details = details

    @property
    def status_code(self) -> int:
        return STATUS_BY_TYPE[self.type]

    @classmethod
    def validation(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ServiceError":
        return cls(message, ServiceErrorType.VALIDATION_ERROR, details)

    @classmethod
    def duplicate(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ServiceError":
        return cls(message, ServiceErrorType.DUPLICATE_ERROR, details)

    @classmethod
    def database(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ServiceError":
        return cls(message, ServiceErrorType.DATABASE_ERROR, details)

    @classmethod
    def not_found(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ServiceError":
        return cls(message, ServiceErrorType.NOT_FOUND_ERROR, details)

    @classmethod
    def unknown(cls, message: str, details: Optional[dict[str, Any]] = None) -> "ServiceError":
        return cls(message, ServiceErrorType.UNKNOWN_ERROR, details)
