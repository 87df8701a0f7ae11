"""Namespace walk: the core of meta discovery.

For an app named ``example.com/a/b`` the walk visits ``example.com/a/b``,
``example.com/a`` and ``example.com`` in that order. At each prefix it
fetches the discovery page, extracts the ``ac-`` declarations that apply
to the app, renders them for the information class being searched for,
and stops at the first prefix that yields at least one result. Prefixes
that fail or yield nothing are recorded as FailedAttempt entries.

Each information class is found by its own walk; walks share nothing,
so the same page may be fetched once per class.
"""

from __future__ import annotations

from typing import Any

import httpx

from acdiscovery.discovery.http import DiscoveryFetcher, HostHeaders
from acdiscovery.discovery.meta import extract_ac_meta
from acdiscovery.discovery.template import render_template
from acdiscovery.errors import DiscoveryExhaustedError, DiscoveryFetchError, NoMatchingMetaError
from acdiscovery.models.app import App
from acdiscovery.models.constants import (
    ACI_EXTENSION,
    EXT_VARIABLE,
    META_ACI_DISCOVERY,
    META_PUBKEYS_DISCOVERY,
    META_TAGS_DISCOVERY,
    NAME_VARIABLE,
    SIGNATURE_EXTENSION,
)
from acdiscovery.models.entities import (
    ACIEndpoint,
    ACMeta,
    DiscoveryResult,
    FailedAttempt,
    ImageTagsEndpoint,
)
from acdiscovery.models.enums import DiscoveryKind, InsecureOption
from acdiscovery.observability import get_logger
from acdiscovery.utils.sanitization import sanitize_url

logger = get_logger(__name__)

_META_NAMES: dict[DiscoveryKind, str] = {
    DiscoveryKind.ACI_ENDPOINTS: META_ACI_DISCOVERY,
    DiscoveryKind.PUBLIC_KEYS: META_PUBKEYS_DISCOVERY,
    DiscoveryKind.IMAGE_TAGS: META_TAGS_DISCOVERY,
}


def _render_with_extensions(uri: str) -> tuple[str, str] | None:
    """Render ``{ext}`` as the artifact and the signature extension.

    Returns None unless both renderings are fully resolved.
    """
    asc, ok = render_template(uri, (EXT_VARIABLE, SIGNATURE_EXTENSION))
    if not ok:
        return None
    artifact, ok = render_template(uri, (EXT_VARIABLE, ACI_EXTENSION))
    if not ok:
        return None
    return artifact, asc


def render_meta(meta: list[ACMeta], app: App, kind: DiscoveryKind) -> list[Any]:
    """Render the declarations that apply to ``app`` for one information class.

    Declarations for other classes, declarations whose prefix is not a
    prefix of the app name, and templates left with unresolved
    placeholders are skipped.

    Returns:
        ACIEndpoint list, public key URL list or ImageTagsEndpoint list,
        depending on ``kind``.
    """
    wanted = _META_NAMES[kind]
    template_vars = app.template_vars()
    rendered: list[Any] = []

    for m in meta:
        if m.name != wanted or not m.applies_to(app.name):
            continue

        if kind is DiscoveryKind.ACI_ENDPOINTS:
            # {ext} is still unrendered here, so the resolved flag is meaningless
            uri, _ = render_template(m.uri, *template_vars)
            urls = _render_with_extensions(uri)
            if urls is not None:
                rendered.append(ACIEndpoint(aci=urls[0], asc=urls[1]))

        elif kind is DiscoveryKind.PUBLIC_KEYS:
            uri, ok = render_template(m.uri, *template_vars)
            if ok:
                rendered.append(uri)

        else:
            # Tag data is shared by every version of the app: only {name} applies
            uri, _ = render_template(m.uri, (NAME_VARIABLE, app.name))
            urls = _render_with_extensions(uri)
            if urls is not None:
                rendered.append(ImageTagsEndpoint(image_tags=urls[0], asc=urls[1]))

    return rendered


async def discover_walk(
    app: App,
    kind: DiscoveryKind,
    fetcher: DiscoveryFetcher,
    insecure: InsecureOption = InsecureOption.NONE,
) -> DiscoveryResult[Any]:
    """Walk the app's namespace until a prefix yields results for ``kind``.

    Args:
        app: App whose namespace is walked.
        kind: Information class searched for.
        fetcher: Fetcher used for every discovery page.
        insecure: Insecure behaviors allowed for fetches.

    Returns:
        DiscoveryResult with the items found at the most specific satisfying
        prefix and the failed attempts recorded before it.

    Raises:
        DiscoveryExhaustedError: If no prefix yielded a result.
    """
    attempts: list[FailedAttempt] = []
    log = logger.bind(app=app.name, kind=kind.value)

    for prefix in app.name_prefixes():
        try:
            fetched = await fetcher.fetch(prefix, insecure)
        except DiscoveryFetchError as e:
            log.debug("acdiscovery.walk.prefix_failed", prefix=prefix, error=e.message)
            attempts.append(FailedAttempt(prefix=prefix, error=e))
            continue

        items = render_meta(extract_ac_meta(fetched.body), app, kind)
        if items:
            log.debug(
                "acdiscovery.walk.satisfied",
                prefix=prefix,
                url=sanitize_url(fetched.url),
                count=len(items),
            )
            return DiscoveryResult(items=items, attempts=attempts, prefix=prefix)

        log.debug("acdiscovery.walk.no_match", prefix=prefix)
        attempts.append(
            FailedAttempt(prefix=prefix, error=NoMatchingMetaError(fetched.url, kind.value))
        )

    log.info("acdiscovery.walk.exhausted", attempts=len(attempts))
    raise DiscoveryExhaustedError(kind.value, app.name, attempts)


def _fetcher(
    fetcher: DiscoveryFetcher | None,
    host_headers: HostHeaders | None,
    transport: httpx.AsyncBaseTransport | None,
) -> DiscoveryFetcher:
    if fetcher is not None:
        return fetcher
    return DiscoveryFetcher(host_headers=host_headers, transport=transport)


async def discover_aci_endpoints(
    app: App,
    insecure: InsecureOption = InsecureOption.NONE,
    host_headers: HostHeaders | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    fetcher: DiscoveryFetcher | None = None,
) -> DiscoveryResult[ACIEndpoint]:
    """Find image and signature URLs via ``ac-discovery`` declarations.

    Args:
        app: App to discover.
        insecure: Insecure behaviors allowed for fetches.
        host_headers: Per-host request headers (e.g. authentication).
        transport: Optional httpx.AsyncBaseTransport (ignored when fetcher is given).
        fetcher: Optional preconfigured DiscoveryFetcher.

    Raises:
        DiscoveryExhaustedError: If no prefix declares a usable endpoint.
    """
    return await discover_walk(
        app,
        DiscoveryKind.ACI_ENDPOINTS,
        _fetcher(fetcher, host_headers, transport),
        insecure,
    )


async def discover_public_keys(
    app: App,
    insecure: InsecureOption = InsecureOption.NONE,
    host_headers: HostHeaders | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    fetcher: DiscoveryFetcher | None = None,
) -> DiscoveryResult[str]:
    """Find public key URLs via ``ac-discovery-pubkeys`` declarations.

    Raises:
        DiscoveryExhaustedError: If no prefix declares a public key. Apps are
            not required to publish keys, so callers usually tolerate this.
    """
    return await discover_walk(
        app,
        DiscoveryKind.PUBLIC_KEYS,
        _fetcher(fetcher, host_headers, transport),
        insecure,
    )


async def discover_image_tags(
    app: App,
    insecure: InsecureOption = InsecureOption.NONE,
    host_headers: HostHeaders | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    fetcher: DiscoveryFetcher | None = None,
) -> DiscoveryResult[ImageTagsEndpoint]:
    """Find tag data URLs via ``ac-discovery-tags`` declarations.

    Raises:
        DiscoveryExhaustedError: If no prefix declares a tag endpoint.
    """
    return await discover_walk(
        app,
        DiscoveryKind.IMAGE_TAGS,
        _fetcher(fetcher, host_headers, transport),
        insecure,
    )


__all__ = [
    "discover_aci_endpoints",
    "discover_image_tags",
    "discover_public_keys",
    "discover_walk",
    "render_meta",
]
