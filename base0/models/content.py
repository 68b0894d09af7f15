"""
Content registry models.

Dependencies: pydantic
System role: API contracts for the pay-to-unlock content registry
"""

from decimal import Decimal, InvalidOperation

from pydantic import BaseModel, ConfigDict, Field, field_validator

from base0.models.common import CamelModel

ATTO_PER_FIL = 10**18


def parse_fil(amount: str | int | float | Decimal) -> int:
    """Convert a FIL decimal amount into attoFIL."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid FIL amount: {amount}") from e
    if value < 0:
        raise ValueError("FIL amount must not be negative")
    return int(value * ATTO_PER_FIL)


def format_fil(atto: int) -> str:
    """Render attoFIL as a FIL decimal string."""
    value = Decimal(atto) / Decimal(ATTO_PER_FIL)
    text = format(value.normalize(), "f")
    return text if "." in text else f"{text}.0"


class StoredContent(CamelModel):
    """A registry entry as seen by one caller."""

    id: int
    title: str
    description: str
    price: int = Field(description="Price in attoFIL")
    owner: str
    is_active: bool
    created_at: int = Field(description="Unix timestamp (seconds)")
    deal_id: int = 0
    piece_size: int
    user_has_access: bool = False


class StoredContentResponse(CamelModel):
    """Registry entry with the price rendered in FIL."""

    id: int
    title: str
    description: str
    price: str
    owner: str
    is_active: bool
    created_at: int
    deal_id: int
    piece_size: int
    user_has_access: bool

    @classmethod
    def from_content(cls, content: StoredContent) -> "StoredContentResponse":
        return cls(**{**content.model_dump(), "price": format_fil(content.price)})


class StoreContentRequest(BaseModel):
    """Request to register new content."""

    model_config = ConfigDict(populate_by_name=True)

    owner: str = Field(description="Address registering the content")
    piece_cid: str = Field(alias="pieceCid", min_length=1)
    data_cid: str = Field(alias="dataCid", min_length=1)
    price: str = Field(description="Price in FIL, e.g. '0.01'")
    title: str = Field(min_length=1)
    description: str = ""
    piece_size: int = Field(alias="pieceSize", ge=0)

    @field_validator("price")
    @classmethod
    def _validate_price(cls, value: str) -> str:
        parse_fil(value)
        return value


class PurchaseAccessRequest(BaseModel):
    """Request to buy time-bounded access to content."""

    model_config = ConfigDict(populate_by_name=True)

    buyer: str
    value: str | None = Field(
        default=None,
        description="Amount paid in FIL; defaults to the content price",
    )


class RecordDealRequest(BaseModel):
    """Request to attach a storage deal to content."""

    model_config = ConfigDict(populate_by_name=True)

    deal_id: int = Field(alias="dealId", gt=0)
    active: bool = False


class ContentCreatedResponse(CamelModel):
    content_id: int
    tx_hash: str | None = None


class ContentCidResponse(CamelModel):
    content_id: int
    data_cid: str


class DealStatusResponse(CamelModel):
    content_id: int
    deal_id: int
    active: bool
