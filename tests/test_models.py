"""
Tests for Bill Splitter models

Test strategy:
1. Unit tests for individual components (models, calculator, validator)
2. Flow tests for the session (participants, items, charges together)
3. No I/O anywhere, so no mocks are needed
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from pydantic import ValidationError

from billsplit.models.split import (
    Currency,
    LineItem,
    Participant,
    SettlementRecord,
    ValidationIssue,
    ValidationResult,
)
from billsplit.models.events import (
    SessionEvent,
    SessionEventBuilder,
    SessionEventSeverity,
    SessionEventType,
)


class TestSplitModels:
    """Tests for participant, item and record models."""

    def test_participant_creation(self):
        """Test Participant model creation."""
        person = Participant(id="p1", name="Alice")
        assert person.id == "p1"
        assert person.name == "Alice"

    def test_participant_strips_whitespace(self):
        """Test that whitespace is stripped from names."""
        person = Participant(name="  Alice  ")
        assert person.name == "Alice"

    def test_participant_ids_are_unique(self):
        """Test that generated ids do not collide."""
        ids = {Participant(name="Same").id for _ in range(200)}
        assert len(ids) == 200

    def test_participant_rejects_blank_name(self):
        """Test that a blank name is rejected."""
        with pytest.raises(ValidationError):
            Participant(name="   ")

    def test_participant_is_immutable(self):
        """Test that participants cannot be changed in place."""
        person = Participant(name="Alice")
        with pytest.raises(ValidationError):
            person.name = "Bob"

    def test_line_item_creation(self):
        """Test LineItem model creation."""
        item = LineItem(name="Lunch", price=Decimal("30.00"), assigned_to=["a", "b"])
        assert item.price == Decimal("30.00")
        assert item.assigned_to == frozenset({"a", "b"})
        assert item.share_count == 2
        assert item.is_assigned is True

    def test_line_item_duplicate_assignees_collapse(self):
        """Test that assigning the same id twice counts once."""
        item = LineItem(name="Lunch", price=10, assigned_to=["a", "a"])
        assert item.share_count == 1

    def test_line_item_defaults_to_unassigned(self):
        """Test that an item without assignees is valid."""
        item = LineItem(name="Snack", price=12)
        assert item.assigned_to == frozenset()
        assert item.is_assigned is False

    def test_line_item_float_price_is_exact(self):
        """Test that float prices are read via their decimal text."""
        item = LineItem(name="Gum", price=0.1)
        assert item.price == Decimal("0.1")

    def test_line_item_rejects_negative_price(self):
        """Test that negative prices are rejected."""
        with pytest.raises(ValueError):
            LineItem(name="Refund", price=Decimal("-1"))

    def test_line_item_zero_price_allowed(self):
        """Test that free items are allowed."""
        item = LineItem(name="Water", price=0)
        assert item.price == Decimal("0")

    def test_settlement_record_item_names(self):
        """Test SettlementRecord keeps item order."""
        lunch = LineItem(name="Lunch", price=30)
        coffee = LineItem(name="Coffee", price=10)
        record = SettlementRecord(
            participant_id="a",
            name="Alice",
            subtotal=Decimal("25"),
            tax_share=Decimal("2.5"),
            tip_share=Decimal("3.75"),
            total=Decimal("31.25"),
            assigned_items=[lunch, coffee],
        )
        assert record.item_names == ["Lunch", "Coffee"]


class TestCurrency:
    """Tests for the display currency enum."""

    def test_all_currencies_exist(self):
        """Test that expected currencies exist."""
        for code in ["USD", "EUR", "GBP", "JPY", "INR", "CAD"]:
            assert Currency(code) is not None

    def test_currency_symbols(self):
        """Test currency display symbols."""
        assert Currency.USD.symbol == "$"
        assert Currency.EUR.symbol == "€"
        assert Currency.CAD.symbol == "C$"
        assert Currency.INR.symbol == "₹"


class TestValidationModels:
    """Tests for ValidationResult."""

    def test_result_with_issue_is_invalid(self):
        """Test is_valid property."""
        result = ValidationResult(
            field="tip",
            raw_value="-5",
            issues=[
                ValidationIssue(
                    field="tip",
                    issue_type="negative",
                    message="Tip cannot be negative",
                ),
            ],
        )
        assert result.is_valid is False
        assert result.amount is None

    def test_result_without_issues_is_valid(self):
        """Test that a parsed amount without issues is valid."""
        result = ValidationResult(field="tax", raw_value="4", amount=Decimal("4"))
        assert result.is_valid is True


class TestSessionEvents:
    """Tests for session event models."""

    def test_session_event_creation(self):
        """Test SessionEvent model creation."""
        event = SessionEvent(
            event_type=SessionEventType.ITEM_ADDED,
            description="Item added: Lunch",
        )
        assert event.severity == SessionEventSeverity.INFO
        assert event.timestamp.tzinfo is not None

    def test_session_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        session_id = uuid4()
        event = SessionEventBuilder.item_added(
            session_id=session_id,
            item_id="i1",
            name="Lunch",
            price=Decimal("30"),
            assigned_to=["a", "b"],
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "item_added"
        assert log_dict["session_id"] == str(session_id)
        assert log_dict["entity_id"] == "i1"
        assert log_dict["details"]["price"] == "30"

    def test_amount_rejected_is_warning(self):
        """Test SessionEventBuilder.amount_rejected."""
        event = SessionEventBuilder.amount_rejected(
            session_id=uuid4(),
            field="tip",
            raw_value="-5",
            reason="Tip cannot be negative",
        )
        assert event.event_type == SessionEventType.AMOUNT_REJECTED
        assert event.severity == SessionEventSeverity.WARNING
        assert event.entity_type == "charge"

    def test_payer_cleared_description(self):
        """Test SessionEventBuilder.payer_changed with no new payer."""
        event = SessionEventBuilder.payer_changed(uuid4(), "a", None)
        assert event.description == "Payer cleared"
        assert event.details == {"previous_payer_id": "a", "payer_id": None}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
