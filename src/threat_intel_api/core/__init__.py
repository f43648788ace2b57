# Core Module - Shared Utilities
#
# Shared functionality for the threat-intel API:
# - Application error classes
# - Structured logging setup

from .errors import AppError, DatabaseError, NotFoundError, ValidationError
from .logging_setup import configure_logging, get_logger

__all__ = [
    # Errors
    "AppError",
    "NotFoundError",
    "ValidationError",
    "DatabaseError",
    # Logging
    "configure_logging",
    "get_logger",
]
