"""
Session Event Models for Bill Splitter

Every mutation of a split session produces one event.
This provides:
1. A readable history of how the split was built
2. Debugging information when a total looks wrong
3. A record of rejected input (e.g. a negative tip)

DESIGN DECISION: Events are append-only and carry plain JSON-friendly
details, so any structlog renderer can emit them unchanged.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionEventType(str, Enum):
    """Types of events a split session emits."""
    # Participants
    PARTICIPANT_ADDED = "participant_added"
    PARTICIPANT_REMOVED = "participant_removed"
    PAYER_CHANGED = "payer_changed"

    # Items
    ITEM_ADDED = "item_added"
    ITEM_REMOVED = "item_removed"
    ITEM_REASSIGNED = "item_reassigned"
    ITEM_REPRICED = "item_repriced"

    # Whole-bill charges and display settings
    CHARGES_UPDATED = "charges_updated"
    SPLIT_RENAMED = "split_renamed"
    CURRENCY_CHANGED = "currency_changed"

    # Rejected input
    AMOUNT_REJECTED = "amount_rejected"

    # Derived state
    RESULTS_RECOMPUTED = "results_recomputed"


class SessionEventSeverity(str, Enum):
    """Severity level for session events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SessionEvent(BaseModel):
    """
    A single session event.

    The session id ties together every event of one split.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: SessionEventType
    severity: SessionEventSeverity = SessionEventSeverity.INFO
    session_id: Optional[UUID] = None

    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'participant', 'item', 'charge')"
    )
    entity_id: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "session_id": str(self.session_id) if self.session_id else None,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
        }


class SessionEventBuilder:
    """
    Helper class to build session events with common patterns.

    Usage:
        event = SessionEventBuilder.participant_added(session_id, participant_id, name)
        event = SessionEventBuilder.amount_rejected(session_id, "tip", "-5", reason)
    """

    @staticmethod
    def participant_added(
        session_id: UUID,
        participant_id: str,
        name: str,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.PARTICIPANT_ADDED,
            session_id=session_id,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant added: {name}",
            details={"name": name},
        )

    @staticmethod
    def participant_removed(
        session_id: UUID,
        participant_id: str,
        name: str,
        unassigned_item_ids: list[str],
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.PARTICIPANT_REMOVED,
            session_id=session_id,
            entity_type="participant",
            entity_id=participant_id,
            description=f"Participant removed: {name}",
            details={
                "name": name,
                "unassigned_from_items": unassigned_item_ids,
            },
        )

    @staticmethod
    def payer_changed(
        session_id: UUID,
        previous_payer_id: Optional[str],
        payer_id: Optional[str],
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.PAYER_CHANGED,
            session_id=session_id,
            entity_type="participant",
            entity_id=payer_id,
            description="Payer cleared" if payer_id is None else "Payer changed",
            details={
                "previous_payer_id": previous_payer_id,
                "payer_id": payer_id,
            },
        )

    @staticmethod
    def item_added(
        session_id: UUID,
        item_id: str,
        name: str,
        price: Decimal,
        assigned_to: list[str],
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.ITEM_ADDED,
            session_id=session_id,
            entity_type="item",
            entity_id=item_id,
            description=f"Item added: {name}",
            details={
                "name": name,
                "price": str(price),
                "assigned_to": assigned_to,
            },
        )

    @staticmethod
    def item_removed(
        session_id: UUID,
        item_id: str,
        name: str,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.ITEM_REMOVED,
            session_id=session_id,
            entity_type="item",
            entity_id=item_id,
            description=f"Item removed: {name}",
            details={"name": name},
        )

    @staticmethod
    def item_reassigned(
        session_id: UUID,
        item_id: str,
        assigned_to: list[str],
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.ITEM_REASSIGNED,
            session_id=session_id,
            entity_type="item",
            entity_id=item_id,
            description=f"Item shared by {len(assigned_to)} participant(s)",
            details={"assigned_to": assigned_to},
        )

    @staticmethod
    def item_repriced(
        session_id: UUID,
        item_id: str,
        old_price: Decimal,
        new_price: Decimal,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.ITEM_REPRICED,
            session_id=session_id,
            entity_type="item",
            entity_id=item_id,
            description="Item price changed",
            details={
                "old_price": str(old_price),
                "new_price": str(new_price),
            },
        )

    @staticmethod
    def charges_updated(
        session_id: UUID,
        charge: str,
        old_value: Decimal,
        new_value: Decimal,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.CHARGES_UPDATED,
            session_id=session_id,
            entity_type="charge",
            entity_id=charge,
            description=f"{charge.capitalize()} changed",
            details={
                "old_value": str(old_value),
                "new_value": str(new_value),
            },
        )

    @staticmethod
    def split_renamed(session_id: UUID, name: str) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.SPLIT_RENAMED,
            session_id=session_id,
            entity_type="split",
            description=f"Split renamed: {name}",
            details={"name": name},
        )

    @staticmethod
    def currency_changed(session_id: UUID, currency: str) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.CURRENCY_CHANGED,
            session_id=session_id,
            entity_type="split",
            description=f"Currency set to {currency}",
            details={"currency": currency},
        )

    @staticmethod
    def amount_rejected(
        session_id: UUID,
        field: str,
        raw_value: str,
        reason: str,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.AMOUNT_REJECTED,
            severity=SessionEventSeverity.WARNING,
            session_id=session_id,
            entity_type="charge" if field in ("tax", "tip") else "item",
            entity_id=field,
            description=f"Rejected {field} amount",
            details={
                "raw_value": raw_value,
                "reason": reason,
            },
        )

    @staticmethod
    def results_recomputed(
        session_id: UUID,
        participant_count: int,
        item_count: int,
        settled_total: Decimal,
    ) -> SessionEvent:
        return SessionEvent(
            event_type=SessionEventType.RESULTS_RECOMPUTED,
            severity=SessionEventSeverity.DEBUG,
            session_id=session_id,
            entity_type="split",
            description="Settlement recomputed",
            details={
                "participants": participant_count,
                "items": item_count,
                "settled_total": str(settled_total),
            },
        )
