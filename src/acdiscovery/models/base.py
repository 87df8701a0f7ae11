"""Base Pydantic model configuration for discovery models.

All discovery models inherit from ACBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so resolved data can be shared between walks
- Strict validation (extra="forbid") to catch typos and invalid fields
- Flexible field naming (populate_by_name=True) for alias support
"""

from pydantic import BaseModel, ConfigDict


class ACBaseModel(BaseModel):
    """Base model for all discovery entities.

    Example:
        >>> from pydantic import Field
        >>> class MyModel(ACBaseModel):
        ...     name: str
        ...     count: int = Field(default=0, ge=0)
        >>>
        >>> obj = MyModel(name="test", count=5)
        >>> obj.name
        'test'
        >>> obj.count = 10  # Raises ValidationError (frozen)
        Traceback (most recent call last):
        ...
        pydantic_core._pydantic_core.ValidationError: ...
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
        validate_assignment=True,
        json_schema_extra={
            "additionalProperties": False,
        },
    )
