"""Meta discovery layer.

Walks an app name's namespace reading ``ac-discovery`` meta declarations:
- walk: the namespace walk and per-class discovery entry points
- http: HTTPS-first fetching with optional plaintext fallback
- meta: extraction of declarations from HTML
- template: URI template rendering
- tags: tag alias resolution and label merging
- resolver: end-to-end resolution (tags, image endpoints, keys)

Public exports:
    discover_aci_endpoints, discover_public_keys, discover_image_tags
    resolve_app, Resolution
    merge_tag, resolve_tag, fetch_image_tags
    DiscoveryFetcher, FetchConfig
"""

from acdiscovery.discovery.http import DiscoveryFetcher, FetchConfig, FetchResult
from acdiscovery.discovery.meta import extract_ac_meta
from acdiscovery.discovery.resolver import Resolution, resolve_app
from acdiscovery.discovery.tags import fetch_image_tags, merge_tag, resolve_tag
from acdiscovery.discovery.template import render_template
from acdiscovery.discovery.walk import (
    discover_aci_endpoints,
    discover_image_tags,
    discover_public_keys,
    discover_walk,
)

__all__ = [
    "DiscoveryFetcher",
    "FetchConfig",
    "FetchResult",
    "Resolution",
    "discover_aci_endpoints",
    "discover_image_tags",
    "discover_public_keys",
    "discover_walk",
    "extract_ac_meta",
    "fetch_image_tags",
    "merge_tag",
    "render_template",
    "resolve_app",
    "resolve_tag",
]
