"""Tests for discovery page fetching and the HTTP fallback policy."""

import httpx
import pytest

from acdiscovery.discovery.http import (
    DiscoveryFetcher,
    FetchConfig,
    discovery_url,
)
from acdiscovery.errors import DiscoveryConnectionError, DiscoveryFetchError
from acdiscovery.models.enums import InsecureOption
from acdiscovery.testing import MetaSite


class TestDiscoveryUrl:
    """Tests for discovery_url."""

    def test_https_by_default(self) -> None:
        """Test the discovery query URL for a prefix."""
        assert discovery_url("example.com/myapp") == "https://example.com/myapp?ac-discovery=1"

    def test_http_scheme(self) -> None:
        """Test the plaintext variant."""
        assert discovery_url("example.com", "http") == "http://example.com?ac-discovery=1"


class TestFetchConfig:
    """Tests for fetch configuration."""

    def test_default_dial_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the connect timeout defaults to five seconds."""
        monkeypatch.delenv("ACDISCOVERY_DIAL_TIMEOUT", raising=False)

        assert FetchConfig().dial_timeout == 5.0

    def test_dial_timeout_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that ACDISCOVERY_DIAL_TIMEOUT overrides the default."""
        monkeypatch.setenv("ACDISCOVERY_DIAL_TIMEOUT", "1.5")

        assert FetchConfig().dial_timeout == 1.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-3"])
    def test_invalid_dial_timeout_falls_back(
        self, monkeypatch: pytest.MonkeyPatch, raw: str
    ) -> None:
        """Test that unusable values fall back to the default."""
        monkeypatch.setenv("ACDISCOVERY_DIAL_TIMEOUT", raw)

        assert FetchConfig().dial_timeout == 5.0


class TestDiscoveryFetcher:
    """Tests for DiscoveryFetcher."""

    @pytest.mark.asyncio
    async def test_https_success(self, site: MetaSite, fetcher: DiscoveryFetcher) -> None:
        """Test that a 200 over HTTPS is returned without trying HTTP."""
        site.add_page("example.com/myapp", "<html></html>")

        result = await fetcher.fetch("example.com/myapp", InsecureOption.ALL)

        assert result.body == b"<html></html>"
        assert result.url == "https://example.com/myapp?ac-discovery=1"
        assert site.visited() == ["https://example.com/myapp"]

    @pytest.mark.asyncio
    async def test_discovery_query_sent(self, site: MetaSite, fetcher: DiscoveryFetcher) -> None:
        """Test that the ac-discovery query parameter is sent."""
        site.add_page("example.com", "<html></html>")

        await fetcher.fetch("example.com", InsecureOption.NONE)

        assert site.requests[0].url.params["ac-discovery"] == "1"

    @pytest.mark.asyncio
    async def test_any_2xx_is_success(self, site: MetaSite, fetcher: DiscoveryFetcher) -> None:
        """Test that non-200 success statuses are accepted."""
        site.add_page("example.com", "<html></html>", status_code=203)

        result = await fetcher.fetch("example.com", InsecureOption.NONE)

        assert result.body == b"<html></html>"

    @pytest.mark.asyncio
    async def test_no_http_fallback_without_option(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that a failed HTTPS fetch is final under the secure policy."""
        site.add_page("example.com", "<html></html>", scheme="http")

        with pytest.raises(DiscoveryFetchError) as exc_info:
            await fetcher.fetch("example.com", InsecureOption.NONE)

        assert exc_info.value.status_code == 404
        assert site.visited() == ["https://example.com"]

    @pytest.mark.asyncio
    async def test_tls_option_alone_does_not_allow_http(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that skipping verification does not enable plaintext."""
        site.add_page("example.com", "<html></html>", scheme="http")

        with pytest.raises(DiscoveryFetchError):
            await fetcher.fetch("example.com", InsecureOption.TLS)

        assert site.visited() == ["https://example.com"]

    @pytest.mark.asyncio
    async def test_http_fallback_on_bad_status(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that HTTP is tried after a non-2xx HTTPS answer when allowed."""
        site.add_status("example.com", 500)
        site.add_page("example.com", "<html>plain</html>", scheme="http")

        result = await fetcher.fetch("example.com", InsecureOption.HTTP)

        assert result.body == b"<html>plain</html>"
        assert result.url.startswith("http://example.com")
        assert site.visited() == ["https://example.com", "http://example.com"]

    @pytest.mark.asyncio
    async def test_http_fallback_on_connection_error(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that HTTP is tried after an HTTPS transport failure when allowed."""
        site.add_error("example.com", httpx.ConnectError("refused"))
        site.add_page("example.com", "<html></html>", scheme="http")

        result = await fetcher.fetch("example.com", InsecureOption.ALL)

        assert result.url.startswith("http://")

    @pytest.mark.asyncio
    async def test_both_attempts_fail_reports_last(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that the HTTP attempt's failure is the one reported."""
        site.add_status("example.com", 500)
        site.add_status("example.com", 403, scheme="http")

        with pytest.raises(DiscoveryFetchError) as exc_info:
            await fetcher.fetch("example.com", InsecureOption.ALL)

        assert exc_info.value.status_code == 403
        assert exc_info.value.url.startswith("http://")

    @pytest.mark.asyncio
    async def test_connection_error_wrapped(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that transport failures become DiscoveryConnectionError."""
        cause = httpx.ConnectError("connection refused")
        site.add_error("example.com", cause)

        with pytest.raises(DiscoveryConnectionError) as exc_info:
            await fetcher.fetch("example.com", InsecureOption.NONE)

        assert exc_info.value.status_code is None
        assert exc_info.value.cause is cause
        assert exc_info.value.code == "acdiscovery:fetch/connection_failed"

    @pytest.mark.asyncio
    async def test_host_headers_sent_to_matching_host(self, site: MetaSite) -> None:
        """Test that per-host headers are attached by request host."""
        site.add_page("example.com", "<html></html>")
        site.add_page("other.org", "<html></html>")
        fetcher = DiscoveryFetcher(
            host_headers={"example.com": {"Authorization": "Bearer abc"}},
            transport=site.transport(),
        )

        await fetcher.fetch("example.com", InsecureOption.NONE)
        await fetcher.fetch("other.org", InsecureOption.NONE)

        assert site.requests[0].headers["Authorization"] == "Bearer abc"
        assert "Authorization" not in site.requests[1].headers

    @pytest.mark.asyncio
    async def test_user_agent_sent(self, site: MetaSite) -> None:
        """Test that the configured User-Agent is sent."""
        site.add_page("example.com", "<html></html>")
        fetcher = DiscoveryFetcher(
            transport=site.transport(),
            config=FetchConfig(dial_timeout=1.0, user_agent="custom-agent"),
        )

        await fetcher.fetch("example.com", InsecureOption.NONE)

        assert site.requests[0].headers["User-Agent"] == "custom-agent"

    @pytest.mark.asyncio
    async def test_fetch_url_forces_https_first(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that absolute http:// URLs are still tried over HTTPS first."""
        site.add_json("tags.example.com/myapp.aci", {"aliases": {}})

        result = await fetcher.fetch_url("http://tags.example.com/myapp.aci", InsecureOption.NONE)

        assert result.url == "https://tags.example.com/myapp.aci"

    @pytest.mark.asyncio
    async def test_redirects_followed(self) -> None:
        """Test that redirects are followed and the final URL reported."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/old":
                return httpx.Response(302, headers={"Location": "https://example.com/new"})
            return httpx.Response(200, content=b"moved")

        redirecting = DiscoveryFetcher(transport=httpx.MockTransport(handler))

        result = await redirecting.fetch_url("https://example.com/old", InsecureOption.NONE)

        assert result.body == b"moved"
        assert result.url == "https://example.com/new"

    @pytest.mark.asyncio
    async def test_host_headers_keyed_with_port(self, site: MetaSite) -> None:
        """Test that a host:port entry matches requests to that port only."""
        site.add_page("example.com/myapp", "<html></html>")
        fetcher = DiscoveryFetcher(
            host_headers={"example.com:8443": {"Authorization": "Bearer port"}},
            transport=site.transport(),
        )

        await fetcher.fetch_url("https://example.com:8443/myapp", InsecureOption.NONE)
        await fetcher.fetch_url("https://example.com/myapp", InsecureOption.NONE)

        assert site.requests[0].headers["Authorization"] == "Bearer port"
        assert "Authorization" not in site.requests[1].headers

    @pytest.mark.asyncio
    async def test_host_headers_bare_host_matches_any_port(self, site: MetaSite) -> None:
        """Test that a bare host entry still applies when the URL carries a port."""
        site.add_page("example.com/myapp", "<html></html>")
        fetcher = DiscoveryFetcher(
            host_headers={"example.com": {"Authorization": "Bearer host"}},
            transport=site.transport(),
        )

        await fetcher.fetch_url("https://example.com:8443/myapp", InsecureOption.NONE)

        assert site.requests[0].headers["Authorization"] == "Bearer host"

    @pytest.mark.asyncio
    async def test_invalid_url_is_domain_error(
        self, site: MetaSite, fetcher: DiscoveryFetcher
    ) -> None:
        """Test that an unparsable URL raises DiscoveryConnectionError without a request."""
        with pytest.raises(DiscoveryConnectionError) as exc_info:
            await fetcher.fetch_url("https://example.com:abc/tags.aci", InsecureOption.ALL)

        assert isinstance(exc_info.value.cause, httpx.InvalidURL)
        assert site.requests == []
