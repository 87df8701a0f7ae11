"""Fetching of discovery pages over HTTPS with an optional HTTP fallback.

Every fetch tries HTTPS first. When the HTTPS attempt fails to connect or
answers with a non-2xx status, the response is discarded and, only if the
InsecureOption allows it, the same URL is retried over plain HTTP.

The HTTP transport is injected (e.g. ``httpx.MockTransport`` in tests)
rather than swapped at module level.

Example:
    >>> fetcher = DiscoveryFetcher(host_headers={"example.com": {"Authorization": "Bearer t"}})
    >>> result = await fetcher.fetch("example.com/myapp", InsecureOption.NONE)  # doctest: +SKIP
    >>> result.url  # doctest: +SKIP
    'https://example.com/myapp?ac-discovery=1'
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from acdiscovery.errors import DiscoveryConnectionError, DiscoveryFetchError
from acdiscovery.models.constants import (
    DEFAULT_DIAL_TIMEOUT_SECONDS,
    DISCOVERY_QUERY,
    ENV_DIAL_TIMEOUT,
)
from acdiscovery.models.enums import InsecureOption
from acdiscovery.observability import get_logger, sanitize_for_logging
from acdiscovery.utils.sanitization import sanitize_url

logger = get_logger(__name__)

DEFAULT_USER_AGENT = "acdiscovery"

HostHeaders = Mapping[str, Mapping[str, str]]


def _default_dial_timeout() -> float:
    """Read the connect timeout from ACDISCOVERY_DIAL_TIMEOUT, falling back to 5s."""
    raw = os.environ.get(ENV_DIAL_TIMEOUT)
    if not raw:
        return DEFAULT_DIAL_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError:
        logger.warning(
            "acdiscovery.config.invalid_dial_timeout",
            value=raw,
            default=DEFAULT_DIAL_TIMEOUT_SECONDS,
        )
        return DEFAULT_DIAL_TIMEOUT_SECONDS
    return value if value > 0 else DEFAULT_DIAL_TIMEOUT_SECONDS


@dataclass(frozen=True)
class FetchConfig:
    """Configuration for discovery fetches.

    Attributes:
        dial_timeout: Seconds allowed for connection establishment (default: 5.0,
            or ACDISCOVERY_DIAL_TIMEOUT). Reads are not bounded.
        follow_redirects: Whether redirects are followed (default: True)
        user_agent: User-Agent header sent with every request
    """

    dial_timeout: float = field(default_factory=_default_dial_timeout)
    follow_redirects: bool = True
    user_agent: str = DEFAULT_USER_AGENT


@dataclass(frozen=True)
class FetchResult:
    """A successfully fetched document.

    Attributes:
        url: Final URL of the response (after redirects)
        body: Response body
    """

    url: str
    body: bytes


def discovery_url(prefix: str, scheme: str = "https") -> str:
    """Return the discovery page URL for a namespace prefix.

    Example:
        >>> discovery_url("example.com/myapp")
        'https://example.com/myapp?ac-discovery=1'
    """
    return f"{scheme}://{prefix}?{DISCOVERY_QUERY}"


class DiscoveryFetcher:
    """Retrieves discovery documents honoring an InsecureOption.

    Holds no state between fetches besides its configuration; a new
    connection is made for every attempt.
    """

    def __init__(
        self,
        host_headers: HostHeaders | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        config: FetchConfig | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            host_headers: Headers to send per host (e.g. authentication),
                passed through unvalidated.
            transport: Optional httpx transport (e.g. httpx.MockTransport for tests).
            config: Optional FetchConfig; defaults are used when omitted.
        """
        self.host_headers: dict[str, dict[str, str]] = {
            host: dict(headers) for host, headers in (host_headers or {}).items()
        }
        self.config = config or FetchConfig()
        self._transport = transport

    async def fetch(self, prefix: str, insecure: InsecureOption) -> FetchResult:
        """Fetch the discovery page for a namespace prefix.

        Raises:
            DiscoveryFetchError: If no attempt produced a 2xx response.
            DiscoveryConnectionError: If the last attempt failed at the transport level.
        """
        return await self.fetch_url(discovery_url(prefix), insecure)

    async def fetch_url(self, url: str, insecure: InsecureOption) -> FetchResult:
        """Fetch an absolute URL over HTTPS, falling back to HTTP if allowed.

        The scheme of ``url`` is ignored; HTTPS is always tried first.

        Raises:
            DiscoveryFetchError: If no attempt produced a 2xx response.
            DiscoveryConnectionError: If the last attempt failed at the transport
                level or ``url`` is not a valid URL.
        """
        try:
            return await self._get(url, "https", verify=not insecure.skip_tls_verify)
        except DiscoveryFetchError as e:
            if not insecure.allow_http:
                raise
            logger.debug(
                "acdiscovery.fetch.https_failed",
                url=sanitize_url(e.url),
                status_code=e.status_code,
                error=e.message,
            )
        return await self._get(url, "http", verify=True)

    def _headers_for(self, url: str) -> dict[str, str]:
        """Return the headers configured for ``host:port``, else for the bare host."""
        parsed = httpx.URL(url)
        netloc = parsed.netloc.decode("ascii")
        headers = self.host_headers.get(netloc, self.host_headers.get(parsed.host, {}))
        return dict(headers)

    def _client(self, *, verify: bool) -> httpx.AsyncClient:
        client_kwargs: dict[str, object] = {
            "timeout": httpx.Timeout(None, connect=self.config.dial_timeout),
            "follow_redirects": self.config.follow_redirects,
            "headers": {"User-Agent": self.config.user_agent},
            "verify": verify,
        }
        if self._transport is not None:
            client_kwargs["transport"] = self._transport
        return httpx.AsyncClient(**client_kwargs)  # type: ignore[arg-type]

    async def _get(self, url: str, scheme: str, *, verify: bool) -> FetchResult:
        target = url
        try:
            target = _with_scheme(url, scheme)
            headers = self._headers_for(target)
            logger.debug(
                "acdiscovery.fetch.attempt",
                url=sanitize_url(target),
                verify=verify,
                headers=sanitize_for_logging(headers),
            )
            async with self._client(verify=verify) as client:
                async with client.stream("GET", target, headers=headers) as response:
                    if not response.is_success:
                        raise DiscoveryFetchError(target, response.status_code)
                    body = await response.aread()
                    return FetchResult(url=str(response.url), body=body)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise DiscoveryConnectionError(target, e) from e


def _with_scheme(url: str, scheme: str) -> str:
    """Return ``url`` with its scheme replaced; scheme-less URLs get one added."""
    if "://" not in url:
        return f"{scheme}://{url}"
    return str(httpx.URL(url).copy_with(scheme=scheme))
