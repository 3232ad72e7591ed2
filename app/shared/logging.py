"""
Logging configuration for the application.

Sets up structured logging with a consistent format.
Logging must not change program behavior.
Never logs sensitive data (request bodies, secrets, raw payloads);
context dictionaries go through sanitize() first.
"""

import logging
import sys
from typing import Any, Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

SENSITIVE_KEYS = (
    "password",
    "passwordhash",
    "password_hash",
    "token",
    "session",
    "secret",
    "apikey",
    "api_key",
    "authorization",
)
REDACTED = "[REDACTED]"

request_logger = logging.getLogger("app.request")
audit_logger = logging.getLogger("app.audit")


def configure_logging(level: str = "INFO") -> None:
    """Configure structured logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)


def sanitize(data: Any) -> Any:
    """Return a copy of ``data`` with sensitive keys redacted, recursively."""
    if isinstance(data, dict):
        return {
            key: REDACTED
            if any(s in str(key).lower() for s in SENSITIVE_KEYS)
            else sanitize(value)
            for key, value in data.items()
        }
    if isinstance(data, (list, tuple)):
        return [sanitize(item) for item in data]
    return data


def log_request(
    request_id: str,
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    user_id: Optional[str] = None,
) -> None:
    """Log one completed HTTP request."""
    request_logger.info(
        "%s %s -> %d (%.1f ms) request_id=%s user=%s",
        method,
        path,
        status_code,
        duration_ms,
        request_id,
        user_id or "-",
    )


def log_auth_failure(
    request_id: str, path: str, reason: str, client_key: Optional[str] = None
) -> None:
    """Log a rejected authentication attempt."""
    audit_logger.warning(
        "Authentication failure on %s: %s (client=%s request_id=%s)",
        path,
        reason,
        client_key or "unknown",
        request_id,
    )


def log_admin_action(
    request_id: str,
    action: str,
    admin_id: str,
    target_id: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> None:
    """Log a privileged action performed by an administrator."""
    audit_logger.info(
        "Admin action %s by admin=%s on target=%s details=%s request_id=%s",
        action,
        admin_id,
        target_id or "-",
        sanitize(details or {}),
        request_id,
    )
