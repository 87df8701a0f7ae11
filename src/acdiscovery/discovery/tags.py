"""Tag resolution: turning a movable tag into concrete labels.

Tag data is served at the URL found through ``ac-discovery-tags``
declarations as a JSON document of aliases and label sets::

    {
        "aliases": {"latest": "2.x"},
        "labels": {"2.x": {"version": "2.0.0"}}
    }

Aliases are followed until a tag with no alias is reached; that terminal
tag's label set (if any) is merged under the labels given explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import ValidationError

from acdiscovery.discovery.http import DiscoveryFetcher
from acdiscovery.errors import CircularTagAliasError, ImageTagsFormatError, VersionLabelConflictError
from acdiscovery.models.constants import VERSION_LABEL
from acdiscovery.models.entities import ImageTags, ImageTagsEndpoint
from acdiscovery.models.enums import InsecureOption
from acdiscovery.observability import get_logger
from acdiscovery.utils.sanitization import sanitize_url

logger = get_logger(__name__)


def resolve_tag(image_tags: ImageTags, tag: str) -> dict[str, str] | None:
    """Follow aliases from ``tag`` and return the terminal tag's labels.

    Args:
        image_tags: Alias graph and label sets.
        tag: Tag to resolve.

    Returns:
        A copy of the terminal tag's label set, or None when the terminal
        tag has no labels.

    Raises:
        CircularTagAliasError: If following aliases revisits a tag.

    Example:
        >>> tags = ImageTags(aliases={"latest": "2.x"}, labels={"2.x": {"version": "2.0.0"}})
        >>> resolve_tag(tags, "latest")
        {'version': '2.0.0'}
    """
    current = tag
    chain = [tag]
    seen = {tag}
    while current in image_tags.aliases:
        current = image_tags.aliases[current]
        chain.append(current)
        if current in seen:
            raise CircularTagAliasError(tag, chain)
        seen.add(current)

    labels = image_tags.labels.get(current)
    return dict(labels) if labels is not None else None


def merge_tag(
    labels: Mapping[str, str],
    image_tags: ImageTags | None,
    tag: str | None,
) -> dict[str, str]:
    """Merge the labels a tag resolves to under the explicit labels.

    Explicit labels always win over tag labels. Without tag data the tag
    itself becomes the ``version`` label. Inputs are never mutated.

    Args:
        labels: Labels given explicitly for the app.
        image_tags: Tag data, or None when no tag data is available.
        tag: Tag to merge; empty or None leaves the labels as they are.

    Returns:
        New label mapping.

    Raises:
        VersionLabelConflictError: If there is no tag data and ``version``
            is already set.
        CircularTagAliasError: If the tag's aliases form a cycle.
    """
    merged = dict(labels)
    if not tag:
        return merged

    if image_tags is None:
        if VERSION_LABEL in merged:
            raise VersionLabelConflictError(tag, merged[VERSION_LABEL])
        merged[VERSION_LABEL] = tag
        return merged

    tag_labels = resolve_tag(image_tags, tag)
    if tag_labels is None:
        return merged

    for name, value in tag_labels.items():
        merged.setdefault(name, value)
    return merged


async def fetch_image_tags(
    endpoint: ImageTagsEndpoint,
    fetcher: DiscoveryFetcher,
    insecure: InsecureOption = InsecureOption.NONE,
) -> ImageTags:
    """Download and validate the tag data document behind an endpoint.

    The signature at ``endpoint.asc`` is not checked here.

    Raises:
        DiscoveryFetchError: If the document could not be retrieved.
        ImageTagsFormatError: If the document is not valid tag data.
    """
    result = await fetcher.fetch_url(endpoint.image_tags, insecure)
    try:
        image_tags = ImageTags.model_validate_json(result.body)
    except ValidationError as e:
        raise ImageTagsFormatError(result.url, f"{e.error_count()} validation error(s): {e}") from e

    logger.debug(
        "acdiscovery.tags.fetched",
        url=sanitize_url(result.url),
        aliases=len(image_tags.aliases),
        tags=len(image_tags.labels),
    )
    return image_tags
