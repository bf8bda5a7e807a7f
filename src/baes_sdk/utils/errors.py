"""
Error handling framework for the BAES SDK.

This module provides:
- Hierarchical exception classes with stable error codes
- Error context preservation
- Structured error responses

Every error that crosses the public API carries a ``code`` so callers can
branch on it instead of on message text.
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from contextlib import contextmanager
import traceback

from .logging import get_logger


logger = get_logger("baes-sdk.errors")


class ErrorSeverity(Enum):
    """Error severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    EXTERNAL_SERVICE = "external_service"
    CHECKPOINT = "checkpoint"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


@dataclass
class ErrorContext:
    """Context information for an error."""
    timestamp: datetime = field(default_factory=datetime.utcnow)
    component: Optional[str] = None
    operation: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    stack_trace: Optional[str] = None


class BaesError(Exception):
    """Base exception for all BAES SDK errors."""

    code: str = "BAES_ERROR"
    default_message: str = "An error occurred in the BAES SDK"
    severity: ErrorSeverity = ErrorSeverity.ERROR
    category: ErrorCategory = ErrorCategory.UNKNOWN
    is_retryable: bool = False

    def __init__(
        self,
        message: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        **kwargs
    ):
        """Initialize BAES error."""
        self.message = message or self.default_message
        self.context = context or ErrorContext()
        self.cause = cause
        self.kwargs = kwargs

        if not self.context.stack_trace and cause is not None:
            self.context.stack_trace = "".join(
                traceback.format_exception(type(cause), cause, cause.__traceback__)
            )

        super().__init__(self.message)

    def get_suggestions(self) -> List[str]:
        """Get error resolution suggestions."""
        return []

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "severity": self.severity.value,
                "category": self.category.value,
                "is_retryable": self.is_retryable,
                "suggestions": self.get_suggestions(),
                "context": {
                    "timestamp": self.context.timestamp.isoformat(),
                    "component": self.context.component,
                    "operation": self.context.operation,
                    "metadata": self.context.metadata
                }
            }
        }


class ConfigurationError(BaesError):
    """Configuration errors."""
    code = "CONFIG_ERROR"
    default_message = "Configuration error"
    category = ErrorCategory.CONFIGURATION

    def get_suggestions(self) -> List[str]:
        return [
            "Check your configuration file syntax",
            "Ensure BAES_API_KEY (or PINATA_JWT) is set"
        ]


# Validation Errors

class ValidationError(BaesError):
    """Input validation errors, raised before any store call."""
    code = "VALIDATION_ERROR"
    default_message = "Validation error"
    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.WARNING

    def __init__(self, field: str, value: Any, constraint: str, **kwargs):
        self.field = field
        self.value = value
        self.constraint = constraint
        message = f"Validation failed for field '{field}': {constraint}"
        super().__init__(message, **kwargs)

    def get_suggestions(self) -> List[str]:
        return [
            f"Check the value of field '{self.field}'",
            f"Ensure it meets the constraint: {self.constraint}"
        ]


# Store Errors

class StoreError(BaesError):
    """Errors raised by a content store backend."""
    code = "STORE_ERROR"
    default_message = "Content store error"
    category = ErrorCategory.EXTERNAL_SERVICE
    is_retryable = True

    def __init__(self, message: Optional[str] = None, status: Optional[int] = None, **kwargs):
        self.status = status
        super().__init__(message, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"]["status"] = self.status
        return data


class StoreUploadError(StoreError):
    """The store rejected or failed to accept an upload."""
    code = "STORE_UPLOAD_ERROR"
    default_message = "Failed to upload content"


class StoreQueryError(StoreError):
    """The store's tag query failed."""
    code = "STORE_QUERY_ERROR"
    default_message = "Failed to query content"


class StoreFetchError(StoreError):
    """A single object could not be retrieved or decoded."""
    code = "STORE_FETCH_ERROR"
    default_message = "Failed to fetch content"


# Checkpoint Errors

class CheckpointError(BaesError):
    """Base class for errors surfaced by the checkpoint manager."""
    code = "CHECKPOINT_ERROR"
    default_message = "Checkpoint operation failed"
    category = ErrorCategory.CHECKPOINT

    def __init__(self, message: Optional[str] = None, **kwargs):
        cause = kwargs.get("cause")
        self.status = getattr(cause, "status", None)
        if isinstance(cause, BaesError):
            self.is_retryable = cause.is_retryable
        super().__init__(message, **kwargs)


class UploadError(CheckpointError):
    """Saving a checkpoint failed."""
    code = "SAVE_CHECKPOINT_ERROR"
    default_message = "Failed to save checkpoint"


class LoadError(CheckpointError):
    """Loading a checkpoint failed."""
    code = "LOAD_CHECKPOINT_ERROR"
    default_message = "Failed to load checkpoint"


class QueryError(CheckpointError):
    """Listing checkpoints failed."""
    code = "QUERY_CHECKPOINTS_ERROR"
    default_message = "Failed to list checkpoints"


# Error Context Manager

@contextmanager
def error_context(
    component: str,
    operation: str,
    reraise: bool = True,
    **metadata
):
    """
    Context manager for error handling with context.

    Args:
        component: Component name
        operation: Operation name
        reraise: Whether to reraise exceptions
        **metadata: Additional context metadata
    """
    context = ErrorContext(
        component=component,
        operation=operation,
        metadata=metadata
    )

    try:
        yield context
    except BaesError as e:
        e.context.component = e.context.component or component
        e.context.operation = e.context.operation or operation
        e.context.metadata.update(metadata)
        logger.error(
            "baes_error_in_context",
            code=e.code,
            error=e.message,
            component=component,
            operation=operation
        )
        if reraise:
            raise
    except Exception as e:
        baes_error = BaesError(
            message=str(e),
            context=context,
            cause=e
        )
        logger.error(
            "unexpected_error_in_context",
            error=str(e),
            error_type=type(e).__name__,
            component=component,
            operation=operation,
            exc_info=True
        )
        if reraise:
            raise baes_error from e


__all__ = [
    'BaesError',
    'ErrorContext',
    'ErrorSeverity',
    'ErrorCategory',
    'ConfigurationError',
    'ValidationError',
    'StoreError',
    'StoreUploadError',
    'StoreQueryError',
    'StoreFetchError',
    'CheckpointError',
    'UploadError',
    'LoadError',
    'QueryError',
    'error_context',
]
