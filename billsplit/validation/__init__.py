"""Amount validation package."""

from billsplit.validation.validator import AmountValidator, InvalidAmountError

__all__ = ["AmountValidator", "InvalidAmountError"]
