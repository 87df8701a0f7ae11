"""App identifier and label model.

An App is the input of every discovery walk: a hierarchical identifier
such as ``example.com/myapp`` and a set of labels (``os``, ``arch``,
``version`` or custom) used to select and render image URLs.

Example:
    >>> app = App.from_string("example.com/reduce-worker:1.0.0,channel=alpha")
    >>> app.name
    'example.com/reduce-worker'
    >>> app.labels == {"version": "1.0.0", "channel": "alpha"}
    True
    >>> str(app)
    'example.com/reduce-worker,channel=alpha,version=1.0.0'
"""

from __future__ import annotations

from urllib.parse import quote_plus, unquote_plus

from pydantic import Field, ValidationError, field_validator

from acdiscovery.errors import MalformedIdentifierError
from acdiscovery.models.base import ACBaseModel
from acdiscovery.models.constants import NAME_VARIABLE, RESERVED_LABEL, VERSION_LABEL
from acdiscovery.models.validators import validate_ac_identifier, validate_labels


class App(ACBaseModel):
    """An app identifier plus its labels.

    Attributes:
        name: Slash-delimited lowercase identifier (e.g. "example.com/myapp").
        labels: Label name to value mapping; "name" is reserved.
    """

    name: str = Field(..., description="AC identifier of the app")
    labels: dict[str, str] = Field(default_factory=dict, description="App labels")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate the app name against the AC identifier grammar."""
        return validate_ac_identifier(v)

    @field_validator("labels")
    @classmethod
    def validate_label_set(cls, v: dict[str, str]) -> dict[str, str]:
        """Validate label names and reject the reserved label."""
        return validate_labels(v)

    @classmethod
    def from_string(cls, app: str) -> App:
        """Parse a command line app parameter.

        Accepted forms::

            example.com/reduce-worker:1.0.0
            example.com/reduce-worker,channel=alpha,label=value
            example.com/reduce-worker:1.0.0,label=value

        Colons are shorthand for ``,version=``. Colon, comma and equal sign
        therefore cannot appear inside label values.

        Raises:
            MalformedIdentifierError: If a segment has no value, a value
                cannot be percent-encoded, a label is given twice, the
                reserved ``name`` label is used, or the name or a label
                name is not a valid identifier.
        """
        expanded = f"{NAME_VARIABLE}=" + app.replace(":", f",{VERSION_LABEL}=")
        encoded: list[tuple[str, str]] = []
        for segment in expanded.split(","):
            key, sep, value = segment.partition("=")
            if not sep:
                raise MalformedIdentifierError(app, f"label {key!r} has no value")
            try:
                encoded.append((key, quote_plus(value)))
            except UnicodeError as e:
                raise MalformedIdentifierError(app, f"label {key!r} value is not encodable") from e

        name = ""
        labels: dict[str, str] = {}
        for index, (key, escaped) in enumerate(encoded):
            try:
                value = unquote_plus(escaped, errors="strict")
            except UnicodeError as e:
                raise MalformedIdentifierError(app, f"label {key!r} value is not decodable") from e
            if index == 0:
                name = value
                continue
            if key == RESERVED_LABEL:
                raise MalformedIdentifierError(app, f"label {RESERVED_LABEL!r} is reserved")
            if key in labels:
                raise MalformedIdentifierError(
                    app, f"label {key!r} with multiple values {[labels[key], value]!r}"
                )
            labels[key] = value

        try:
            return cls(name=name, labels=labels)
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            raise MalformedIdentifierError(app, reasons) from e

    def with_labels(self, labels: dict[str, str]) -> App:
        """Return a copy of this app carrying ``labels`` instead.

        Raises:
            MalformedIdentifierError: If a label name or value is invalid.
        """
        try:
            return App(name=self.name, labels=dict(labels))
        except ValidationError as e:
            reasons = "; ".join(err["msg"] for err in e.errors())
            raise MalformedIdentifierError(str(self), reasons) from e

    def template_vars(self) -> list[tuple[str, str]]:
        """Return the (variable, value) pairs used to render URI templates.

        ``name`` comes first, followed by the labels in name order.
        """
        return [(NAME_VARIABLE, self.name), *sorted(self.labels.items())]

    def name_prefixes(self) -> list[str]:
        """Return the namespace prefixes of the name, most specific first.

        Example:
            >>> App(name="example.com/a/b").name_prefixes()
            ['example.com/a/b', 'example.com/a', 'example.com']
        """
        parts = self.name.split("/")
        return ["/".join(parts[:end]) for end in range(len(parts), 0, -1)]

    def __str__(self) -> str:
        return ",".join([self.name, *(f"{k}={v}" for k, v in sorted(self.labels.items()))])
