"""
Bill Splitter - Source Package

Splits a shared bill between a small group of people: participants,
line items assigned to one or more of them, and whole-bill tax and tip
become a per-person amount owed to whoever paid.

DESIGN PRINCIPLES:
1. The calculation is a pure function of a snapshot
2. Amounts are validated before they reach the session
3. No rounding until something is displayed
4. Every session mutation is logged
"""

from billsplit.calculator import calculate, grand_total
from billsplit.session import SplitSession, UnresolvedPayerError

__version__ = "1.0.0"
__author__ = "Bill Splitter Team"

__all__ = [
    "SplitSession",
    "UnresolvedPayerError",
    "calculate",
    "grand_total",
]
