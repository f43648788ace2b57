"""
Application error classes.

Every error the service raises on purpose derives from ``AppError`` and
carries the HTTP status and machine-readable code the API layer puts in
the error envelope.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base exception for threat-intel API errors"""

    def __init__(
        self,
        message: str,
        status_code: int,
        code: str,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details


class NotFoundError(AppError):
    """Raised when a referenced entity does not exist"""

    def __init__(self, resource: str, entity_id: str):
        super().__init__(
            f"{resource} with id '{entity_id}' not found",
            404,
            "NOT_FOUND",
        )
        self.resource = resource
        self.entity_id = entity_id


class ValidationError(AppError):
    """Raised when request parameters are malformed"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, 400, "VALIDATION_ERROR", details)


class DatabaseError(AppError):
    """Raised when the store cannot be opened or queried"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message, 500, "DATABASE_ERROR", details)
