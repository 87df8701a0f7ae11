"""Discovery entities.

Values produced and consumed by the discovery engine: meta declarations
found in HTML pages, rendered endpoints, failed walk attempts, walk
results and the tag data document.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import ConfigDict, Field, field_validator

from acdiscovery.models.base import ACBaseModel
from acdiscovery.models.validators import validate_labels

T = TypeVar("T")


class ACMeta(ACBaseModel):
    """A ``<meta>`` declaration in the ``ac-`` namespace.

    Attributes:
        name: Meta name (e.g. "ac-discovery").
        prefix: Identifier prefix the declaration applies to.
        uri: URI template (e.g. "https://example.com/{name}-{version}.{ext}").
    """

    name: str
    prefix: str
    uri: str

    def applies_to(self, app_name: str) -> bool:
        """Return whether this declaration applies to the given identifier."""
        return app_name.startswith(self.prefix)


class ACIEndpoint(ACBaseModel):
    """Rendered image URL and its detached signature URL."""

    aci: str = Field(..., description="Image (ACI) URL")
    asc: str = Field(..., description="Detached signature URL")


class ImageTagsEndpoint(ACBaseModel):
    """Rendered tag data URL and its detached signature URL."""

    image_tags: str = Field(..., description="Tag data URL")
    asc: str = Field(..., description="Detached signature URL")


class ImageTags(ACBaseModel):
    """Tag data document served at an image tags endpoint.

    Wire shape::

        {"aliases": {"latest": "2.x"}, "labels": {"2.x": {"version": "2.0.0"}}}

    Attributes:
        aliases: Tag to tag mapping.
        labels: Terminal tag to label set mapping.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    aliases: dict[str, str] = Field(default_factory=dict)
    labels: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("labels")
    @classmethod
    def validate_tag_labels(cls, v: dict[str, dict[str, str]]) -> dict[str, dict[str, str]]:
        """Validate every label set; tags may not set the reserved label."""
        for labels in v.values():
            validate_labels(labels)
        return v


@dataclass(frozen=True)
class FailedAttempt:
    """A namespace prefix that did not satisfy a walk.

    Kept for debugging and user feedback; never fatal to a walk.

    Attributes:
        prefix: Namespace prefix that was visited.
        error: Fetch error, or NoMatchingMetaError when the page had nothing usable.
    """

    prefix: str
    error: Exception


@dataclass(frozen=True)
class DiscoveryResult(Generic[T]):
    """Items found by a namespace walk plus the prefixes that failed before it.

    Attributes:
        items: Discovered items, in declaration order.
        attempts: Failed attempts, in visit order.
        prefix: The prefix whose page satisfied the walk.
    """

    items: list[T]
    attempts: list[FailedAttempt] = field(default_factory=list)
    prefix: str | None = None
