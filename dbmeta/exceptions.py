"""Error types for dbmeta."""

from typing import Any, Optional


class DbMetaError(Exception):
    """Base exception for dbmeta errors."""

    def __init__(self, message: str, code: str = "DBMETA_ERROR", details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class MetadataRetrievalError(DbMetaError):
    """A catalog query failed while reading schema metadata."""

    def __init__(self, message: str, operation: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="METADATA_RETRIEVAL_ERROR", details=details)
        self.operation = operation


class DDLValidationError(DbMetaError):
    """A column's declared shape cannot be rendered as valid DDL."""

    def __init__(self, message: str, column_name: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message, code="DDL_VALIDATION_ERROR", details=details)
        self.column_name = column_name


class UnsupportedDialectError(DbMetaError):
    """No DDL generator is registered for the requested database type."""

    def __init__(self, db_type: str, supported: Optional[list[str]] = None):
        super().__init__(
            f"Unsupported database type '{db_type}'",
            code="UNSUPPORTED_DIALECT",
            details={"supported": supported or []},
        )
        self.db_type = db_type
