"""Discovery data models.

Public exports:
    App: App identifier plus labels
    ACMeta, ACIEndpoint, ImageTagsEndpoint, ImageTags: Discovery entities
    FailedAttempt, DiscoveryResult: Walk outcomes
    InsecureOption, DiscoveryKind: Enumerations
"""

from acdiscovery.models.app import App
from acdiscovery.models.entities import (
    ACIEndpoint,
    ACMeta,
    DiscoveryResult,
    FailedAttempt,
    ImageTags,
    ImageTagsEndpoint,
)
from acdiscovery.models.enums import DiscoveryKind, InsecureOption

__all__ = [
    "ACIEndpoint",
    "ACMeta",
    "App",
    "DiscoveryKind",
    "DiscoveryResult",
    "FailedAttempt",
    "ImageTags",
    "ImageTagsEndpoint",
    "InsecureOption",
]
