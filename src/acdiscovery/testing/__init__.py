"""acdiscovery testing utilities.

Modules:
    site: MetaSite, an in-memory discovery site behind httpx.MockTransport,
          and render_meta_page for building discovery HTML.

Example:
    >>> from acdiscovery.testing import MetaSite
    >>> site = MetaSite()
    >>> site.add_status("example.com/myapp", 500)
"""

from acdiscovery.testing.site import MetaSite, render_meta_page

__all__ = [
    "MetaSite",
    "render_meta_page",
]
