"""Observability module for acdiscovery.

Structured logging (structlog) with JSON output for production and
colored console output for development.

Example:
    >>> from acdiscovery.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.debug("acdiscovery.fetch.attempt", url="https://example.com?ac-discovery=1")
"""

from acdiscovery.observability.logging import (
    bind_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "bind_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
