"""Extraction of ``ac-`` meta declarations from discovery pages.

A discovery page is HTML carrying declarations such as::

    <meta name="ac-discovery" content="example.com https://example.com/{name}-{version}.{ext}">

Extraction is best-effort: malformed markup never raises, and whatever
declarations were read before the parser gave up are returned.
"""

from __future__ import annotations

from lxml import etree

from acdiscovery.models.constants import META_NAME_PREFIX
from acdiscovery.models.entities import ACMeta
from acdiscovery.observability import get_logger

logger = get_logger(__name__)


def parse_meta_content(name: str, content: str) -> ACMeta | None:
    """Build a declaration from a meta element's name and content attributes.

    The content is trimmed and split on its first space into the prefix
    and the URI template. Returns None for names outside the ``ac-``
    namespace or when the prefix or URI is empty.
    """
    prefix, _, uri = content.strip().partition(" ")
    uri = uri.strip()
    if not name.startswith(META_NAME_PREFIX) or not prefix or not uri:
        return None
    return ACMeta(name=name, prefix=prefix, uri=uri)


def extract_ac_meta(body: bytes | str) -> list[ACMeta]:
    """Return the ``ac-`` meta declarations of an HTML document, in document order.

    Args:
        body: Raw HTML bytes (or text) of a discovery page.

    Returns:
        List of ACMeta; empty when the page has none or cannot be parsed.
    """
    if not body:
        return []

    # libxml2 assumes Latin-1 for undeclared byte input; discovery pages are UTF-8
    encoding = "utf-8" if isinstance(body, bytes) else None
    parser = etree.HTMLPullParser(events=("start",), tag="meta", encoding=encoding)
    try:
        parser.feed(body)
        parser.close()
    except etree.LxmlError as e:
        logger.debug(
            "acdiscovery.meta.parse_error",
            error=str(e),
            error_type=type(e).__name__,
        )

    found: list[ACMeta] = []
    for _event, element in parser.read_events():
        meta = parse_meta_content(element.get("name") or "", element.get("content") or "")
        if meta is not None:
            found.append(meta)
    return found
