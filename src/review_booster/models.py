"""Data models for client documents and request payloads."""

from typing import Any, Dict, List

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)
from pydantic.alias_generators import to_camel

CLIENT_ID_PATTERN = r"^[A-Za-z0-9]{3,50}$"
HEX_COLOR_PATTERN = r"^#[0-9a-fA-F]{6}$"
SEED_FILE_PATTERN = r"^$|^[\w.-]+\.json$"

_ABSOLUTE_URL = TypeAdapter(AnyUrl)


def _require_absolute_uri(value: str) -> str:
    # AnyUrl would percent-encode spaces the stored-document schema rejects.
    if any(ch.isspace() for ch in value):
        raise ValueError("must be an absolute URI")
    try:
        _ABSOLUTE_URL.validate_python(value)
    except ValidationError:
        raise ValueError("must be an absolute URI") from None
    # Keep the string as given; AnyUrl normalizes (trailing slash, host case).
    return value


class _CamelModel(BaseModel):
    """Attributes are snake_case in Python and camelCase on disk and on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ClientDetails(_CamelModel):
    """The editable part of a client's review page."""

    client_name: str = Field(..., min_length=3, max_length=100)
    google_review_link: str = Field(..., description="Where happy customers are sent.")
    logo_url: str = Field("", description="Absolute URI or an empty string.")
    primary_color: str = Field(..., pattern=HEX_COLOR_PATTERN)
    secondary_color: str = Field(..., pattern=HEX_COLOR_PATTERN)

    @field_validator("google_review_link")
    @classmethod
    def _check_review_link(cls, value: str) -> str:
        return _require_absolute_uri(value)

    @field_validator("logo_url")
    @classmethod
    def _check_logo_url(cls, value: str) -> str:
        return value and _require_absolute_uri(value)

    def supplied_fields(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class ClientCreate(ClientDetails):
    """Body of a create request: details plus identity and seed selection."""

    client_id: str = Field(..., pattern=CLIENT_ID_PATTERN)
    source_review_file: str = Field(
        "",
        pattern=SEED_FILE_PATTERN,
        description="Seed file in the data directory; empty selects the default.",
    )

    def details(self) -> ClientDetails:
        fields = self.model_dump(
            exclude={"client_id", "source_review_file"}, exclude_unset=True
        )
        return ClientDetails(**fields)


class ClientDocument(ClientDetails):
    """One persisted client: details, identity and newest-first reviews."""

    model_config = ConfigDict(extra="ignore")

    client_id: str = Field(..., pattern=CLIENT_ID_PATTERN)
    reviews: List[str] = Field(default_factory=list)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

    def detail(self) -> Dict[str, Any]:
        """Detail projection: everything except the review list."""
        return self.model_dump(by_alias=True, exclude={"reviews"})


class ClientSummary(_CamelModel):
    client_id: str
    client_name: str


class ReviewPayload(_CamelModel):
    review: str = Field(..., min_length=5, max_length=500)
