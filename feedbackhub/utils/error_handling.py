"""
Error handling for Feedback Hub.

This module provides the exception taxonomy shared by every component, plus
helpers for logging and converting errors at component boundaries.
"""

import logging
import traceback
import functools
import time
from typing import Any, Callable, Dict, Optional, Type


logger = logging.getLogger(__name__)


class FeedbackHubError(Exception):
    """Base exception class for all Feedback Hub errors."""
    status_code: int = 500

    def __init__(self, message: str, component: str = "unknown",
                 details: Optional[Dict[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.component = component
        self.details = details or {}
        self.code = code
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Render the error as a JSON-serializable response body."""
        body: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details:
            body["details"] = self.details.get("reason", self.details)
        if self.code:
            body["code"] = self.code
        return body


class ValidationError(FeedbackHubError):
    """A required field is missing or a value is out of range."""
    status_code = 400


class NotFoundError(FeedbackHubError):
    """A requested record does not exist."""
    status_code = 404


class PersistenceError(FeedbackHubError):
    """A datastore operation failed."""
    status_code = 500

    def __init__(self, message: str, component: str = "datastore",
                 details: Optional[Dict[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, component=component, details=details, code=code or "UNKNOWN")


class ConfigurationError(FeedbackHubError):
    """Error related to system configuration."""
    status_code = 500


class AnalysisUnavailable(FeedbackHubError):
    """
    The language-model service failed or returned unusable data.

    Always absorbed by a fallback at the call site.
    """
    status_code = 503

    def __init__(self, message: str, component: str = "analysis",
                 details: Optional[Dict[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message, component=component, details=details, code=code)


def catch_and_log(component: str, default_return: Any = None) -> Callable:
    """
    Decorator for coroutines that must not fail: log any exception and return a default.

    Args:
        component: Component name for logging
        default_return: Value returned when the wrapped coroutine raises

    Returns:
        Decorated coroutine function
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in {func.__name__} ({component}): {e}")
                logger.debug(f"Stack trace: {traceback.format_exc()}")
                return default_return

        return wrapper

    return decorator


class AsyncErrorContext:
    """
    Async context manager for error handling.

    Example:
        async with AsyncErrorContext("datastore", "Insert failed", PersistenceError):
            row = await client.post(...)
    """

    def __init__(self, component: str, message: str,
                 error_class: Type[FeedbackHubError] = FeedbackHubError,
                 code: Optional[str] = None):
        """
        Initialize the async error context.

        Args:
            component: Component name
            message: Error message
            error_class: Error class to raise for foreign exceptions
            code: Optional error code attached to the raised error
        """
        self.component = component
        self.message = message
        self.error_class = error_class
        self.code = code

    async def __aenter__(self):
        """Enter the context."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit the context, wrapping foreign errors."""
        if exc_type is None:
            return False

        logger.error(f"Error in {self.component}: {self.message} - {exc_val}")

        # Project errors already carry their context
        if isinstance(exc_val, FeedbackHubError):
            return False

        raise self.error_class(
            message=self.message,
            component=self.component,
            details={"reason": str(exc_val), "original_error": exc_type.__name__},
            code=self.code
        ) from exc_val
