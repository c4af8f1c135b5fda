"""
Amount Validation

DESIGN DECISION: Amounts are validated BEFORE they reach the session.
The calculator trusts its input; this module is where a negative tip,
a typo like "12,5O" or an absurd price gets stopped.

Checks, in order:
- Missing (None or blank string)
- Malformed (not a number, or a boolean)
- Non-finite (NaN, Infinity)
- Negative
- Above the configured maximum

IMPORTANT: Validation NEVER silently fixes a value.
It either returns the parsed Decimal or reports why it could not.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional

from billsplit.config import get_settings
from billsplit.models.split import ValidationIssue, ValidationResult


class InvalidAmountError(ValueError):
    """A price, tax or tip that must not reach the calculator."""

    def __init__(self, issue: ValidationIssue, raw_value):
        super().__init__(issue.message)
        self.issue = issue
        self.raw_value = raw_value

    @property
    def field(self) -> str:
        return self.issue.field


class AmountValidator:
    """
    Parses and checks user-entered money amounts.

    Accepts Decimal, int, float or str. Floats go through str() so that
    0.1 is read as Decimal('0.1').
    """

    def __init__(self, max_amount: Optional[Decimal] = None):
        """
        Initialize validator.

        Args:
            max_amount: Largest accepted amount.
                        If None, the configured `max_amount` is used.
        """
        if max_amount is None:
            max_amount = get_settings().max_amount
        self._max_amount = Decimal(max_amount)

    @property
    def max_amount(self) -> Decimal:
        return self._max_amount

    def _issue(self, field: str, issue_type: str, message: str) -> ValidationIssue:
        return ValidationIssue(field=field, issue_type=issue_type, message=message)

    def _to_decimal(self, raw, field: str) -> tuple[Optional[Decimal], Optional[ValidationIssue]]:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return None, self._issue(field, "missing", f"{field.capitalize()} is required")

        # bool is an int subclass; True is not an amount
        if isinstance(raw, bool):
            return None, self._issue(field, "malformed", f"{field.capitalize()} must be a number")

        if isinstance(raw, Decimal):
            return raw, None
        if isinstance(raw, (int, float)):
            return Decimal(str(raw)), None
        if isinstance(raw, str):
            try:
                return Decimal(raw.strip()), None
            except InvalidOperation:
                return None, self._issue(
                    field,
                    "malformed",
                    f"{field.capitalize()} is not a valid number: {raw.strip()!r}",
                )

        return None, self._issue(
            field,
            "malformed",
            f"{field.capitalize()} must be a number, got {type(raw).__name__}",
        )

    def check(self, raw, field: str = "amount") -> ValidationResult:
        """
        Check a proposed amount without raising.

        Returns a ValidationResult; `amount` is set only when valid.
        """
        amount, issue = self._to_decimal(raw, field)

        if issue is None and not amount.is_finite():
            issue = self._issue(field, "not_finite", f"{field.capitalize()} must be a finite number")
        elif issue is None and amount < 0:
            issue = self._issue(field, "negative", f"{field.capitalize()} cannot be negative")
        elif issue is None and amount > self._max_amount:
            issue = self._issue(
                field,
                "too_large",
                f"{field.capitalize()} exceeds the maximum of {self._max_amount}",
            )

        if issue is not None:
            return ValidationResult(field=field, raw_value=str(raw), issues=[issue])
        return ValidationResult(field=field, raw_value=str(raw), amount=amount)

    def parse(self, raw, field: str = "amount") -> Decimal:
        """
        Parse a proposed amount.

        Raises InvalidAmountError if the amount is unusable.
        """
        result = self.check(raw, field)
        if not result.is_valid:
            raise InvalidAmountError(result.issues[0], raw)
        return result.amount
