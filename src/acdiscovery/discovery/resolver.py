"""End-to-end resolution of an app into image URLs and public keys.

Order of operations:

1. When a tag is given, walk for ``ac-discovery-tags``; if a tag
   endpoint is found, download its tag data. Merge the tag into the
   app's labels (without tag data the tag becomes the version label).
2. Walk for ``ac-discovery`` image endpoints. Finding none is an error.
3. Walk for ``ac-discovery-pubkeys``. Finding none yields no keys.

Every walk is independent; nothing is cached between or within calls.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from acdiscovery.discovery.http import DiscoveryFetcher, HostHeaders
from acdiscovery.discovery.tags import fetch_image_tags, merge_tag
from acdiscovery.discovery.walk import (
    discover_aci_endpoints,
    discover_image_tags,
    discover_public_keys,
)
from acdiscovery.errors import DiscoveryExhaustedError
from acdiscovery.models.app import App
from acdiscovery.models.entities import ACIEndpoint, FailedAttempt, ImageTags, ImageTagsEndpoint
from acdiscovery.models.enums import DiscoveryKind, InsecureOption
from acdiscovery.observability import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolve_app.

    Attributes:
        app: The app with tag labels merged in.
        aci_endpoints: Image and signature URLs, in declaration order.
        public_keys: Public key URLs (empty when none are published).
        image_tags_endpoint: Tag endpoint used, if a tag was resolved through one.
        attempts: Failed attempts of every walk performed, per information class.
    """

    app: App
    aci_endpoints: list[ACIEndpoint]
    public_keys: list[str] = field(default_factory=list)
    image_tags_endpoint: ImageTagsEndpoint | None = None
    attempts: dict[DiscoveryKind, list[FailedAttempt]] = field(default_factory=dict)


async def resolve_app(
    app: App,
    tag: str | None = None,
    insecure: InsecureOption = InsecureOption.NONE,
    host_headers: HostHeaders | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    fetcher: DiscoveryFetcher | None = None,
) -> Resolution:
    """Resolve an app (and optional tag) into image URLs and public keys.

    Args:
        app: App to resolve.
        tag: Optional movable tag (e.g. "latest").
        insecure: Insecure behaviors allowed for every fetch.
        host_headers: Per-host request headers.
        transport: Optional httpx transport (ignored when fetcher is given).
        fetcher: Optional preconfigured DiscoveryFetcher.

    Raises:
        CircularTagAliasError: If the tag's aliases form a cycle.
        VersionLabelConflictError: If the tag must become the version label
            but the app already has one.
        MalformedIdentifierError: If the merged labels are invalid (e.g. an
            overlong tag used as the version label).
        DiscoveryFetchError: If tag data was declared but could not be fetched.
        ImageTagsFormatError: If the tag data is invalid.
        DiscoveryExhaustedError: If no image endpoint is discovered.
    """
    if fetcher is None:
        fetcher = DiscoveryFetcher(host_headers=host_headers, transport=transport)
    attempts: dict[DiscoveryKind, list[FailedAttempt]] = {}
    log = logger.bind(app=app.name)

    tags_endpoint: ImageTagsEndpoint | None = None
    if tag:
        image_tags: ImageTags | None = None
        try:
            tags_result = await discover_image_tags(app, insecure, fetcher=fetcher)
        except DiscoveryExhaustedError as e:
            attempts[DiscoveryKind.IMAGE_TAGS] = e.attempts
            log.info("acdiscovery.resolve.no_tag_endpoint", tag=tag)
        else:
            attempts[DiscoveryKind.IMAGE_TAGS] = tags_result.attempts
            tags_endpoint = tags_result.items[0]
            image_tags = await fetch_image_tags(tags_endpoint, fetcher, insecure)
        app = app.with_labels(merge_tag(app.labels, image_tags, tag))
        log.debug("acdiscovery.resolve.tag_merged", tag=tag, labels=app.labels)

    aci = await discover_aci_endpoints(app, insecure, fetcher=fetcher)
    attempts[DiscoveryKind.ACI_ENDPOINTS] = aci.attempts

    public_keys: list[str] = []
    try:
        keys = await discover_public_keys(app, insecure, fetcher=fetcher)
    except DiscoveryExhaustedError as e:
        attempts[DiscoveryKind.PUBLIC_KEYS] = e.attempts
        log.info("acdiscovery.resolve.no_public_keys")
    else:
        attempts[DiscoveryKind.PUBLIC_KEYS] = keys.attempts
        public_keys = keys.items

    return Resolution(
        app=app,
        aci_endpoints=aci.items,
        public_keys=public_keys,
        image_tags_endpoint=tags_endpoint,
        attempts=attempts,
    )
