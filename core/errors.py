# core/errors.py

"""
Exception taxonomy for Gradebook and Student operations.

Every error carries a machine-readable `ErrorCode` and an HTTP-style status code so
callers can branch on the failure kind without parsing messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    # === Not Found ===
    NOT_FOUND = "NOT_FOUND"

    # === Constraint Violations ===
    DUPLICATE_ID = "DUPLICATE_ID"

    # === Validation Failures ===
    # field value is out of bounds or incorrectly formatted
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"

    # === Internal Faults ===
    IO_ERROR = "IO_ERROR"


class GradebookError(Exception):
    """
    Base class for all Gradebook errors.

    Attributes:
        detail (str): Human-readable explanation.
        error (ErrorCode): Machine-readable error identifier.
        status_code (int): HTTP-style status code.
    """

    error: ErrorCode = ErrorCode.INVALID_FIELD_VALUE
    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {
            "error": self.error.value,
            "detail": self.detail,
            "status_code": self.status_code,
        }


class ValidationError(GradebookError, ValueError):
    error = ErrorCode.INVALID_FIELD_VALUE
    status_code = 400


class DuplicateKeyError(GradebookError):
    error = ErrorCode.DUPLICATE_ID
    status_code = 409


class NotFoundError(GradebookError, LookupError):
    error = ErrorCode.NOT_FOUND
    status_code = 404


class StorageIOError(GradebookError, OSError):
    error = ErrorCode.IO_ERROR
    status_code = 500
