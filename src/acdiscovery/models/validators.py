"""Shared validators for discovery models."""

import re

from acdiscovery.models.constants import (
    AC_IDENTIFIER_PATTERN,
    MAX_LABEL_VALUE_LENGTH,
    RESERVED_LABEL,
)

_AC_IDENTIFIER_RE = re.compile(AC_IDENTIFIER_PATTERN)


def validate_ac_identifier(v: str) -> str:
    """Validate an AC identifier (app name or label name).

    Raises ValueError if the string is empty or not lowercase alphanumerics
    joined by single ``-``, ``.``, ``_``, ``~`` or ``/`` separators.
    """
    if not _AC_IDENTIFIER_RE.match(v):
        raise ValueError(
            "Invalid ACIdentifier, must contain lower case alphanumeric characters "
            f"plus '-._~/', got: {v!r}"
        )
    return v


def validate_labels(labels: dict[str, str]) -> dict[str, str]:
    """Validate label names and values, rejecting the reserved ``name`` label."""
    for key, value in labels.items():
        if key == RESERVED_LABEL:
            raise ValueError(f"Label {RESERVED_LABEL!r} is reserved")
        validate_ac_identifier(key)
        if len(value) > MAX_LABEL_VALUE_LENGTH:
            raise ValueError(
                f"Label {key!r} value must be at most {MAX_LABEL_VALUE_LENGTH} "
                f"characters, got {len(value)}"
            )
    return labels
