"""acdiscovery Error Taxonomy.

This module defines the error hierarchy for app discovery, providing
structured error handling with specific error codes and context
information.

Errors fall into five groups:
- parse errors (malformed app strings), fatal to a resolution
- fetch errors, recorded per namespace prefix and never fatal to a walk
- exhaustion errors, raised when a whole walk found nothing
- tag resolution errors, fatal and raised before any endpoint walk
- tag data format errors
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from acdiscovery.models.entities import FailedAttempt


class ACDiscoveryError(Exception):
    """Base exception for all discovery errors.

    Attributes:
        code: Error code following the acdiscovery:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class MalformedIdentifierError(ACDiscoveryError):
    """Raised when an app string or one of its labels cannot be parsed.

    Attributes:
        value: The offending app string or label fragment
        reason: Short description of what is wrong
    """

    def __init__(self, value: str, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Malformed app string {value!r}: {reason}"
        super().__init__(
            code="acdiscovery:parse/malformed_identifier",
            message=message,
            details={"value": value, "reason": reason, **(details or {})},
        )
        self.value = value
        self.reason = reason


class DiscoveryFetchError(ACDiscoveryError):
    """Raised when a discovery page could not be retrieved with a 2xx status.

    Attributes:
        url: Last URL attempted
        status_code: HTTP status of the last response (None when no response)
    """

    def __init__(
        self,
        url: str,
        status_code: int | None,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        if message is None:
            message = f"Expected a 2xx response from {url}, got {status_code}"
        super().__init__(
            code="acdiscovery:fetch/bad_status",
            message=message,
            details={"url": url, "status_code": status_code, **(details or {})},
        )
        self.url = url
        self.status_code = status_code


class DiscoveryConnectionError(DiscoveryFetchError):
    """Raised when the transport failed before any usable response arrived.

    Attributes:
        cause: The underlying transport exception
    """

    def __init__(self, url: str, cause: Exception) -> None:
        super().__init__(
            url=url,
            status_code=None,
            message=f"Failed to fetch {url}: {type(cause).__name__}: {cause}",
            details={"error_type": type(cause).__name__},
        )
        self.code = "acdiscovery:fetch/connection_failed"
        self.cause = cause


class DiscoveryExhaustedError(ACDiscoveryError):
    """Raised when a namespace walk visited every prefix and found nothing.

    The ordered list of failed attempts is attached for diagnostics.

    Attributes:
        kind: The information class that was searched for
        app_name: Identifier whose namespace was walked
        attempts: Failed attempts recorded during the walk, in visit order
    """

    def __init__(
        self,
        kind: str,
        app_name: str,
        attempts: list[FailedAttempt],
        details: dict[str, Any] | None = None,
    ) -> None:
        message = f"No {kind.replace('_', ' ')} discovered for {app_name}"
        super().__init__(
            code="acdiscovery:walk/exhausted",
            message=message,
            details={
                "kind": kind,
                "app_name": app_name,
                "attempts": [{"prefix": a.prefix, "error": str(a.error)} for a in attempts],
                **(details or {}),
            },
        )
        self.kind = kind
        self.app_name = app_name
        self.attempts = list(attempts)


class CircularTagAliasError(ACDiscoveryError):
    """Raised when following tag aliases revisits a tag.

    Attributes:
        tag: The tag resolution started from
        chain: Tags visited, ending with the repeated one
    """

    def __init__(self, tag: str, chain: list[str]) -> None:
        message = f"Circular dependency between tag aliases: {' -> '.join(chain)}"
        super().__init__(
            code="acdiscovery:tags/circular_alias",
            message=message,
            details={"tag": tag, "chain": list(chain)},
        )
        self.tag = tag
        self.chain = list(chain)


class VersionLabelConflictError(ACDiscoveryError):
    """Raised when a tag would set the version label but one is already given."""

    def __init__(self, tag: str, version: str) -> None:
        message = (
            f"Cannot set tag {tag!r} as version label since version label "
            f"is already defined ({version!r})"
        )
        super().__init__(
            code="acdiscovery:tags/version_conflict",
            message=message,
            details={"tag": tag, "version": version},
        )
        self.tag = tag
        self.version = version


class ImageTagsFormatError(ACDiscoveryError):
    """Raised when a downloaded tag document is not valid tag data."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(
            code="acdiscovery:tags/invalid_document",
            message=f"Invalid image tags document at {url}: {reason}",
            details={"url": url, "reason": reason},
        )
        self.url = url
        self.reason = reason


class NoMatchingMetaError(ACDiscoveryError):
    """Recorded when a discovery page was fetched but declared nothing usable.

    The page either had no applicable declaration for the searched
    information class, or every template needed a label the app lacks.
    """

    def __init__(self, url: str, kind: str) -> None:
        super().__init__(
            code="acdiscovery:walk/no_matching_meta",
            message=f"No usable {kind.replace('_', ' ')} declarations at {url}",
            details={"url": url, "kind": kind},
        )
        self.url = url
        self.kind = kind
