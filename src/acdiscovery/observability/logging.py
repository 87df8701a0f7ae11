"""Structured logging configuration for acdiscovery.

This module configures structlog for structured logging with support for
both development (console) and production (JSON) output formats.

Environment Variables:
    ACDISCOVERY_LOG_FORMAT: Set to "json" for JSON output, "console" for colored output
    ACDISCOVERY_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR)
    ACDISCOVERY_SERVICE_NAME: Service name to include in logs
    ACDISCOVERY_DEBUG: Set to "true" or "1" to log host headers unredacted

Example:
    >>> from acdiscovery.observability.logging import get_logger, configure_logging
    >>>
    >>> configure_logging(log_format="json", log_level="INFO")
    >>> logger = get_logger("acdiscovery.discovery.walk")
    >>> logger.info("acdiscovery.walk.satisfied", prefix="example.com")
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import Processor

# Default configuration
DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "console"
DEFAULT_SERVICE_NAME = "acdiscovery"

# Environment variable names
ENV_LOG_FORMAT = "ACDISCOVERY_LOG_FORMAT"
ENV_LOG_LEVEL = "ACDISCOVERY_LOG_LEVEL"
ENV_SERVICE_NAME = "ACDISCOVERY_SERVICE_NAME"
ENV_DEBUG = "ACDISCOVERY_DEBUG"

# Placeholder for redacted sensitive values in logs
REDACTED_PLACEHOLDER = "***REDACTED***"

# Key substrings (case-insensitive) that indicate sensitive data to redact
_SENSITIVE_KEY_PATTERNS = frozenset(
    {"password", "token", "secret", "authorization", "auth", "cookie"}
)

_logging_configured = False


def _is_sensitive_key(key: str) -> bool:
    """Return True if the key name indicates sensitive data that should be redacted."""
    lower = key.lower()
    return any(pattern in lower for pattern in _SENSITIVE_KEY_PATTERNS)


def sanitize_for_logging(data: dict[str, Any]) -> dict[str, Any]:
    """Sanitize a dict for safe logging by redacting sensitive field values.

    Keys matching (case-insensitive) password, token, secret, authorization,
    auth or cookie have their values replaced with REDACTED_PLACEHOLDER.
    Nested dicts (e.g. per-host header maps) are sanitized recursively.
    Nothing is redacted when debug mode is on.

    Example:
        >>> sanitize_for_logging({"example.com": {"Authorization": "Bearer abc"}})
        {'example.com': {'Authorization': '***REDACTED***'}}
    """
    if not data:
        return {}
    if is_debug_mode():
        return dict(data)
    result: dict[str, Any] = {}
    for k, v in data.items():
        if _is_sensitive_key(k):
            result[k] = REDACTED_PLACEHOLDER
        elif isinstance(v, dict):
            result[k] = sanitize_for_logging(v)
        else:
            result[k] = v
    return result


def is_debug_mode() -> bool:
    """Return True if ACDISCOVERY_DEBUG is set to a truthy value (e.g. true, 1)."""
    value = os.environ.get(ENV_DEBUG, "").strip().lower()
    return value in ("true", "1", "yes", "on")


def _get_log_level() -> str:
    return os.environ.get(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()


def _get_log_format() -> str:
    return os.environ.get(ENV_LOG_FORMAT, DEFAULT_LOG_FORMAT).lower()


def _get_service_name() -> str:
    return os.environ.get(ENV_SERVICE_NAME, DEFAULT_SERVICE_NAME)


def _get_shared_processors() -> list[Processor]:
    """Get shared processors for all log formats."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(
    log_format: str | None = None,
    log_level: str | None = None,
    service_name: str | None = None,
    force: bool = False,
) -> None:
    """Configure structured logging for the application.

    Log output goes to stderr so command output on stdout stays parseable.

    Args:
        log_format: Output format - "json" or "console". Defaults to env var or "console"
        log_level: Minimum log level. Defaults to env var or "WARNING"
        service_name: Service name for log context. Defaults to env var or "acdiscovery"
        force: If True, reconfigure even if already configured
    """
    global _logging_configured

    if _logging_configured and not force:
        return

    log_format = log_format or _get_log_format()
    log_level = log_level or _get_log_level()
    service_name = service_name or _get_service_name()

    shared_processors = _get_shared_processors()

    if log_format == "json":
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=True,
            exception_formatter=structlog.dev.plain_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level))

    structlog.contextvars.bind_contextvars(service=service_name)

    _logging_configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger for the given name.

    If logging has not been configured, it will be configured with
    default settings.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("event.happened", key="value")
    """
    if not _logging_configured:
        configure_logging()

    return structlog.stdlib.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent logs (e.g. app name)."""
    structlog.contextvars.bind_contextvars(**kwargs)
