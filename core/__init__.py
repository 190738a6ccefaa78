"""
Core utilities and configuration for the Steam achievement sync backend.

Modules:
    config: Application configuration and environment variable management
    database: Database engine, session factory and healthcheck
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import async_session_maker
    from core.exceptions import ProviderError, ConfigurationError
    from core.logging import setup_logging
"""

__all__ = [
    "settings",
    "async_session_maker",
    "db_healthcheck",
    "setup_logging",
    # Exceptions
    "SyncException",
    "ConfigurationError",
    "ProviderError",
    "NetworkError",
    "RateLimitError",
    "AuthenticationError",
    "MalformedResponseError",
    "StoreError",
    "DeliveryError",
    "RetryableError",
    "NonRetryableError",
]
