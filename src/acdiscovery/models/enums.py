"""Enumerations for app discovery.

This module defines the enum types used in discovery to ensure
type safety and prevent magic strings.
"""

from enum import Enum, IntFlag


class InsecureOption(IntFlag):
    """Insecure behaviors permitted while fetching discovery pages.

    HTTPS is always attempted first; these flags only relax how that
    attempt is made and whether a plaintext retry is allowed.

    Example:
        >>> InsecureOption.ALL & InsecureOption.HTTP
        <InsecureOption.HTTP: 2>
        >>> bool(InsecureOption.NONE & InsecureOption.TLS)
        False
    """

    NONE = 0
    TLS = 1
    HTTP = 2
    ALL = TLS | HTTP

    @property
    def skip_tls_verify(self) -> bool:
        """Whether certificate validation is disabled for HTTPS attempts."""
        return bool(self & InsecureOption.TLS)

    @property
    def allow_http(self) -> bool:
        """Whether a failed HTTPS attempt may be retried over plain HTTP."""
        return bool(self & InsecureOption.HTTP)


class DiscoveryKind(str, Enum):
    """Information classes a namespace walk can look for."""

    ACI_ENDPOINTS = "aci_endpoints"
    PUBLIC_KEYS = "public_keys"
    IMAGE_TAGS = "image_tags"
