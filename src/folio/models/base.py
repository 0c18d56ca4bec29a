"""Base Pydantic model configuration for folio models.

All folio models inherit from FolioBaseModel to ensure consistent behavior:
- Immutability (frozen=True) so static profile data cannot drift at runtime
- Strict validation (extra="forbid") to catch typos in static tables
- Flexible field naming (populate_by_name=True) for camelCase wire aliases
"""

from pydantic import BaseModel, ConfigDict


class FolioBaseModel(BaseModel):
    """Base model for profiles, catalog assets and API payloads.

    Example:
        >>> class Badge(FolioBaseModel):
        ...     label: str
        >>> Badge(label="governance").label
        'governance'
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        validate_default=True,
    )


class FolioRequestModel(FolioBaseModel):
    """Base for inbound JSON payloads.

    Unknown keys are ignored rather than rejected, so older or newer
    clients sending extra fields are still served.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        str_strip_whitespace=True,
    )
