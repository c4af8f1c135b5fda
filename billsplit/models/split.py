"""
Core Data Models for Bill Splitter

These models define the schemas for everything the calculator reads and
returns. They are designed to:
1. Enforce the non-negative price invariant at construction time
2. Be immutable snapshots, so the calculator can never alter caller state
3. Keep money as Decimal end to end

DESIGN DECISION: Participants and items are frozen Pydantic v2 models.
The session changes an item by replacing it (`model_copy(update=...)`),
never by mutating it in place.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def new_id() -> str:
    """Collision-safe identifier for participants and items."""
    return uuid4().hex


def to_decimal(value):
    """Convert floats through str() so 0.1 stays Decimal('0.1')."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """
    Display currencies.

    DESIGN DECISION: Currency is display-only. It is never passed into the
    calculator and no conversion between currencies exists.
    """
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"
    INR = "INR"
    CAD = "CAD"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]


_CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.JPY: "¥",
    Currency.INR: "₹",
    Currency.CAD: "C$",
}


# =============================================================================
# INPUT MODELS
# =============================================================================

class Participant(BaseModel):
    """
    A person splitting the bill.

    Identity is the id. Two participants may share a name.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique participant ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )


class LineItem(BaseModel):
    """
    A single line on the bill.

    `assigned_to` may be empty: the item still counts toward the bill
    total but toward nobody's subtotal.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Unique item ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Description of the line item"
    )
    price: Decimal = Field(
        ...,
        ge=0,
        description="Price of the item in the split's currency"
    )
    assigned_to: frozenset[str] = Field(
        default_factory=frozenset,
        description="IDs of the participants sharing this item"
    )

    @field_validator('price', mode='before')
    @classmethod
    def coerce_price(cls, v):
        return to_decimal(v)

    @property
    def share_count(self) -> int:
        return len(self.assigned_to)

    @property
    def is_assigned(self) -> bool:
        return bool(self.assigned_to)


# =============================================================================
# OUTPUT MODELS
# =============================================================================

class SettlementRecord(BaseModel):
    """
    What one participant owes for the bill.

    CRITICAL: Amounts are unrounded. Rounding belongs to the display layer
    and must never be fed back into a calculation.
    """
    model_config = ConfigDict(frozen=True)

    participant_id: str
    name: str
    subtotal: Decimal = Field(
        ...,
        description="Sum of this participant's shares of assigned items"
    )
    tax_share: Decimal = Field(
        ...,
        description="Tax allocated in proportion to the subtotal"
    )
    tip_share: Decimal = Field(
        ...,
        description="Tip allocated in proportion to the subtotal"
    )
    total: Decimal = Field(
        ...,
        description="subtotal + tax_share + tip_share"
    )
    assigned_items: list[LineItem] = Field(
        default_factory=list,
        description="Items this participant shares, in entry order"
    )

    @property
    def item_names(self) -> list[str]:
        return [item.name for item in self.assigned_items]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found with a proposed amount."""

    field: str = Field(
        ...,
        description="Field with the issue (e.g., 'price', 'tax', 'tip')"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'malformed', 'negative')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """
    Result of checking a proposed amount.

    `amount` is only set when the value is usable.
    """

    field: str
    raw_value: str
    amount: Optional[Decimal] = None
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues
