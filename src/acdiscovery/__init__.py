"""App Container meta discovery.

Resolves an app identifier (``example.com/myapp``) plus labels and an
optional tag into image, signature and public key URLs by walking the
identifier namespace and reading ``ac-discovery`` meta declarations.

Example:
    >>> import asyncio
    >>> from acdiscovery import App, resolve_app
    >>> app = App.from_string("example.com/myapp:1.0.0,os=linux,arch=amd64")
    >>> resolution = asyncio.run(resolve_app(app))  # doctest: +SKIP
    >>> resolution.aci_endpoints[0].aci  # doctest: +SKIP
    'https://storage.example.com/example.com/myapp-1.0.0-linux-amd64.aci'
"""

from acdiscovery.discovery.resolver import Resolution, resolve_app
from acdiscovery.models.app import App
from acdiscovery.models.enums import InsecureOption

__version__ = "0.3.0"

__all__ = [
    "App",
    "InsecureOption",
    "Resolution",
    "__version__",
    "resolve_app",
]
