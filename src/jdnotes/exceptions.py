"""Custom exceptions for the JD Notes backend.

Provides a structured exception hierarchy with error codes and
machine-readable error information. Every message embeds the underlying
cause so it can be shown to the user as-is.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Directory errors (1xxx)
    APP_DATA_DIR_UNAVAILABLE = 1001
    APP_DATA_DIR_CREATE_FAILED = 1002

    # Storage errors (4xxx)
    STORAGE_READ_FAILED = 4001
    STORAGE_WRITE_FAILED = 4002
    STORAGE_COPY_FAILED = 4003
    STORAGE_CREATE_DIR_FAILED = 4004
    STORAGE_BACKUP_FAILED = 4005
    DATABASE_NOT_FOUND = 4006

    # Serialization errors (5xxx)
    SERIALIZE_FAILED = 5001
    DESERIALIZE_FAILED = 5002

    # Configuration errors (6xxx)
    CONFIG_INVALID = 6001


class JDNotesError(Exception):
    """Base exception for all JD Notes backend errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class DirectoryResolutionError(JDNotesError):
    """Raised when the application-data directory cannot be determined or created."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.APP_DATA_DIR_UNAVAILABLE,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)[:200]
        super().__init__(message, code=code, details=details)
        self.original_error = original_error


class StorageError(JDNotesError):
    """Raised when a filesystem step on the config or database file fails."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path"] = path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error


class SerializationError(JDNotesError):
    """Raised when JSON encoding or decoding fails outside of config recovery."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.DESERIALIZE_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if original_error:
            details["original_error"] = str(original_error)[:200]
        super().__init__(message, code=code, details=details)
        self.original_error = original_error


class ConfigurationError(JDNotesError):
    """Raised for invalid runtime settings."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        code: ErrorCode = ErrorCode.CONFIG_INVALID
    ):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, code=code, details=details)
        self.config_key = config_key
