"""
Logging configuration
"""

import logging
import sys
from typing import Iterable, Optional
from core.config import settings

REDACTED = "***"


class SecretRedactionFilter(logging.Filter):
    """
    Mask secrets in rendered log messages.

    Steam API calls carry the key as a query parameter, which shows up in any
    log line that includes a request URL.
    """

    def __init__(self, secrets: Iterable[Optional[str]]):
        super().__init__()
        self.secrets = [s for s in secrets if s]

    def filter(self, record: logging.LogRecord) -> bool:
        if not self.secrets:
            return True

        message = record.getMessage()
        redacted = message
        for secret in self.secrets:
            redacted = redacted.replace(secret, REDACTED)

        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging():
    """Configure application logging"""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(SecretRedactionFilter([settings.STEAM_API_KEY]))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[handler]
    )

    for noisy in ("sqlalchemy.engine", "sqlalchemy.pool", "httpx", "apscheduler"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging configured at {settings.LOG_LEVEL} level (env={settings.ENVIRONMENT})"
    )
