"""
Data Models Package

This package contains all Pydantic models used in the Bill Splitter.
Everything the calculator reads or returns conforms to these schemas.
"""

from billsplit.models.split import (
    Currency,
    LineItem,
    Participant,
    SettlementRecord,
    ValidationIssue,
    ValidationResult,
    new_id,
    to_decimal,
)
from billsplit.models.events import (
    SessionEvent,
    SessionEventBuilder,
    SessionEventSeverity,
    SessionEventType,
)

__all__ = [
    # Split models
    "Currency",
    "LineItem",
    "Participant",
    "SettlementRecord",
    "ValidationIssue",
    "ValidationResult",
    "new_id",
    "to_decimal",
    # Session event models
    "SessionEvent",
    "SessionEventBuilder",
    "SessionEventSeverity",
    "SessionEventType",
]
