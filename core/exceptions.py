"""
Custom exceptions for the achievement sync pipeline with structured error context.

Each exception carries context information for debugging and for the
structured failure summaries returned by the sync endpoints.

Exception Hierarchy:
    SyncException (base)
    ├── ConfigurationError
    ├── ProviderError
    │   ├── NetworkError
    │   ├── RateLimitError
    │   ├── AuthenticationError
    │   └── MalformedResponseError
    ├── StoreError
    ├── DeliveryError
    └── RetryableError / NonRetryableError (mixins)
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class SyncException(Exception):
    """
    Base exception for all sync-related errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (app_id, url, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Retry Strategy Mixins
# ============================================================================

class RetryableError(SyncException):
    """
    Mixin for transient errors that the provider client retries:
    - Network timeouts and connection failures
    - Rate limiting (HTTP 429)
    - Server errors (HTTP 5xx)
    """
    pass


class NonRetryableError(SyncException):
    """
    Mixin for permanent errors that surface immediately:
    - Authentication failures (HTTP 401, 403)
    - Malformed or error-bearing responses
    """
    pass


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigurationError(SyncException):
    """
    Raised when the tracked account or its credentials are not configured.

    Context should include:
        - setting: Name of the missing environment variable
    """
    pass


# ============================================================================
# Provider Errors
# ============================================================================

class ProviderError(SyncException):
    """
    Base exception for Steam Web API failures.

    Context should include:
        - endpoint: The API endpoint that failed
        - app_id: The game being fetched (per-game calls only)
        - status_code: HTTP status code (if applicable)
    """
    pass


class NetworkError(RetryableError, ProviderError):
    """Transport errors and HTTP 5xx responses."""
    pass


class RateLimitError(RetryableError, ProviderError):
    """Rate limiting errors (HTTP 429)."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
        retry_after: Optional[float] = None
    ):
        super().__init__(message, context, original_exception)
        self.retry_after = retry_after
        if retry_after:
            self.context["retry_after"] = retry_after


class AuthenticationError(NonRetryableError, ProviderError):
    """Rejected API key (HTTP 401, 403)."""
    pass


class MalformedResponseError(NonRetryableError, ProviderError):
    """Response body is not the JSON shape the client expects."""
    pass


# ============================================================================
# Store Errors
# ============================================================================

class StoreError(SyncException):
    """
    Exception raised when a store operation fails.

    Context should include:
        - operation: Type of operation (UPSERT, INSERT, SELECT)
        - table_name: Name of the table
    """
    pass


# ============================================================================
# Delivery Errors
# ============================================================================

class DeliveryError(SyncException):
    """
    Transport-level failure delivering a webhook to one target.

    Context should include:
        - target_id: ID of the webhook target
        - url: Destination URL
    """
    pass
