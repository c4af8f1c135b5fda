"""
Split Session

This module owns the state of one bill split and defines the flows that
change it:
1. Participants (add, remove, choose who paid)
2. Items (add, remove, reprice, assign to participants)
3. Whole-bill charges (tax, tip)

DESIGN DECISION: The session is the single writer.
- Every mutation goes through a method here
- Amounts are validated before they are stored
- Results are recomputed from scratch after every change
- Every change is logged

The calculator receives snapshots (tuples of frozen models) and keeps no
reference to session state.
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID, uuid4

from billsplit.audit import SessionLogger
from billsplit.calculator import calculate, items_subtotal
from billsplit.config import SPLIT_NAME_MAX_LENGTH, get_settings
from billsplit.export import build_summary_text
from billsplit.models.events import SessionEventBuilder
from billsplit.models.split import (
    Currency,
    LineItem,
    Participant,
    SettlementRecord,
)
from billsplit.validation import AmountValidator, InvalidAmountError

ZERO = Decimal("0")


class UnresolvedPayerError(LookupError):
    """A payer-dependent view was requested while no payer is set."""
    pass


def _clean_split_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError("Split name cannot be blank")
    if len(name) > SPLIT_NAME_MAX_LENGTH:
        raise ValueError(f"Split name cannot exceed {SPLIT_NAME_MAX_LENGTH} characters")
    return name


class SplitSession:
    """
    One bill being split.

    Flow:
    1. Name the split and pick a display currency
    2. Add participants (the first one becomes the payer)
    3. Add items; each defaults to everyone present at that moment
    4. Adjust assignments, tax and tip
    5. Read `results` or `summary_text()`

    `results` is always current: it is rebuilt after every mutation.
    """

    def __init__(
        self,
        name: Optional[str] = None,
        currency: Optional[Currency] = None,
        validator: Optional[AmountValidator] = None,
        logger: Optional[SessionLogger] = None,
    ):
        settings = get_settings()

        self.session_id: UUID = uuid4()
        self._name = _clean_split_name(name or settings.default_split_name)
        self._currency = Currency(currency) if currency else settings.default_currency
        self._validator = validator or AmountValidator()
        self._logger = logger or SessionLogger()

        self._participants: list[Participant] = []
        self._items: list[LineItem] = []
        self._payer_id: Optional[str] = None
        self._tax = ZERO
        self._tip = ZERO
        self._results: list[SettlementRecord] = []

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def currency(self) -> Currency:
        return self._currency

    @property
    def participants(self) -> tuple[Participant, ...]:
        return tuple(self._participants)

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(self._items)

    @property
    def tax(self) -> Decimal:
        return self._tax

    @property
    def tip(self) -> Decimal:
        return self._tip

    @property
    def payer_id(self) -> Optional[str]:
        return self._payer_id

    @property
    def payer(self) -> Optional[Participant]:
        if self._payer_id is None:
            return None
        return self._find_participant(self._payer_id)

    @property
    def results(self) -> list[SettlementRecord]:
        return list(self._results)

    @property
    def items_subtotal(self) -> Decimal:
        return items_subtotal(self._items)

    @property
    def total_tax(self) -> Decimal:
        return sum((r.tax_share for r in self._results), ZERO)

    @property
    def total_tip(self) -> Decimal:
        return sum((r.tip_share for r in self._results), ZERO)

    @property
    def settled_total(self) -> Decimal:
        """Sum of everyone's totals (unassigned items are not in it)."""
        return sum((r.total for r in self._results), ZERO)

    @property
    def history(self):
        return self._logger.history

    def require_payer(self) -> Participant:
        """Return the payer or raise UnresolvedPayerError."""
        payer = self.payer
        if payer is None:
            raise UnresolvedPayerError("No participant has been marked as the payer")
        return payer

    def record_for(self, participant_id: str) -> SettlementRecord:
        for record in self._results:
            if record.participant_id == participant_id:
                return record
        raise KeyError(participant_id)

    def amount_owed(self, participant_id: str) -> Decimal:
        """
        What this participant owes the payer.

        The payer owes nothing. Without a payer everyone "owes" their total.
        """
        record = self.record_for(participant_id)
        if participant_id == self._payer_id:
            return ZERO
        return record.total

    def summary_text(self) -> str:
        """The copy/paste summary for the current results."""
        return build_summary_text(self._name, self._results, self.payer, self._currency)

    # -------------------------------------------------------------------------
    # Split settings
    # -------------------------------------------------------------------------

    def rename(self, name: str) -> None:
        name = _clean_split_name(name)
        self._name = name
        self._logger.log(SessionEventBuilder.split_renamed(self.session_id, name))

    def set_currency(self, currency) -> None:
        """Change the display currency. Amounts are not converted."""
        self._currency = Currency(currency)
        self._logger.log(
            SessionEventBuilder.currency_changed(self.session_id, self._currency.value)
        )

    # -------------------------------------------------------------------------
    # Participants
    # -------------------------------------------------------------------------

    def add_participant(self, name: str) -> Participant:
        """
        Add a participant.

        The first participant added becomes the payer if none is set.
        """
        if not name or not name.strip():
            raise ValueError("Participant name cannot be blank")

        participant = Participant(name=name)
        self._participants.append(participant)
        self._logger.log(SessionEventBuilder.participant_added(
            self.session_id, participant.id, participant.name,
        ))

        if self._payer_id is None:
            self._change_payer(participant.id)

        self._recompute()
        return participant

    def remove_participant(self, participant_id: str) -> None:
        """
        Remove a participant.

        Cascades:
        - The id is stripped from every item (the lost share is NOT
          redistributed to the remaining assignees)
        - If they were the payer, the first remaining participant becomes
          payer, or the payer is cleared
        """
        participant = self._find_participant(participant_id)
        if participant is None:
            raise KeyError(participant_id)

        self._participants = [p for p in self._participants if p.id != participant_id]

        unassigned = []
        for index, item in enumerate(self._items):
            if participant_id in item.assigned_to:
                self._items[index] = item.model_copy(
                    update={"assigned_to": item.assigned_to - {participant_id}}
                )
                unassigned.append(item.id)

        self._logger.log(SessionEventBuilder.participant_removed(
            self.session_id, participant_id, participant.name, unassigned,
        ))

        if self._payer_id == participant_id:
            replacement = self._participants[0].id if self._participants else None
            self._change_payer(replacement)

        self._recompute()

    def set_payer(self, participant_id: Optional[str]) -> None:
        """Mark who paid the bill. None clears the payer."""
        if participant_id is not None and self._find_participant(participant_id) is None:
            raise KeyError(participant_id)
        self._change_payer(participant_id)

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def add_item(
        self,
        name: str,
        price,
        assigned_to: Optional[Iterable[str]] = None,
    ) -> LineItem:
        """
        Add a line item.

        Without `assigned_to` the item is shared by every participant
        present right now. Participants added later are not attached.

        Raises InvalidAmountError for a bad price; nothing is added then.
        """
        if not name or not name.strip():
            raise ValueError("Item name cannot be blank")

        amount = self._parse_amount(price, "price")
        if assigned_to is None:
            assignees = frozenset(p.id for p in self._participants)
        else:
            assignees = frozenset(assigned_to)

        item = LineItem(name=name, price=amount, assigned_to=assignees)
        self._items.append(item)
        self._logger.log(SessionEventBuilder.item_added(
            self.session_id, item.id, item.name, item.price, sorted(item.assigned_to),
        ))

        self._recompute()
        return item

    def remove_item(self, item_id: str) -> None:
        index = self._item_index(item_id)
        item = self._items.pop(index)
        self._logger.log(SessionEventBuilder.item_removed(self.session_id, item.id, item.name))
        self._recompute()

    def toggle_assignment(self, item_id: str, participant_id: str) -> LineItem:
        """Add the participant to the item, or take them off it if already on."""
        index = self._item_index(item_id)
        item = self._items[index]
        if participant_id in item.assigned_to:
            assignees = item.assigned_to - {participant_id}
        else:
            if self._find_participant(participant_id) is None:
                raise KeyError(participant_id)
            assignees = item.assigned_to | {participant_id}
        return self._reassign(index, assignees)

    def assign_item(self, item_id: str, participant_ids: Iterable[str]) -> LineItem:
        """Replace the item's assignees. An empty iterable unassigns it."""
        index = self._item_index(item_id)
        assignees = frozenset(participant_ids)
        for participant_id in assignees:
            if self._find_participant(participant_id) is None:
                raise KeyError(participant_id)
        return self._reassign(index, assignees)

    def update_item_price(self, item_id: str, price) -> LineItem:
        """
        Change an item's price.

        On InvalidAmountError the previous price is kept.
        """
        index = self._item_index(item_id)
        amount = self._parse_amount(price, "price")

        item = self._items[index]
        updated = item.model_copy(update={"price": amount})
        self._items[index] = updated
        self._logger.log(SessionEventBuilder.item_repriced(
            self.session_id, item.id, item.price, amount,
        ))

        self._recompute()
        return updated

    # -------------------------------------------------------------------------
    # Whole-bill charges
    # -------------------------------------------------------------------------

    def set_tax(self, value) -> Decimal:
        """Set the bill's tax. On InvalidAmountError the previous tax is kept."""
        amount = self._parse_amount(value, "tax")
        old, self._tax = self._tax, amount
        self._logger.log(SessionEventBuilder.charges_updated(self.session_id, "tax", old, amount))
        self._recompute()
        return amount

    def set_tip(self, value) -> Decimal:
        """Set the bill's tip. On InvalidAmountError the previous tip is kept."""
        amount = self._parse_amount(value, "tip")
        old, self._tip = self._tip, amount
        self._logger.log(SessionEventBuilder.charges_updated(self.session_id, "tip", old, amount))
        self._recompute()
        return amount

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _find_participant(self, participant_id: str) -> Optional[Participant]:
        for participant in self._participants:
            if participant.id == participant_id:
                return participant
        return None

    def _item_index(self, item_id: str) -> int:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                return index
        raise KeyError(item_id)

    def _parse_amount(self, raw, field: str) -> Decimal:
        try:
            return self._validator.parse(raw, field)
        except InvalidAmountError as e:
            self._logger.log(SessionEventBuilder.amount_rejected(
                self.session_id, field, str(raw), e.issue.message,
            ))
            raise

    def _change_payer(self, participant_id: Optional[str]) -> None:
        if participant_id == self._payer_id:
            return
        previous, self._payer_id = self._payer_id, participant_id
        self._logger.log(SessionEventBuilder.payer_changed(
            self.session_id, previous, participant_id,
        ))

    def _reassign(self, index: int, assignees: frozenset) -> LineItem:
        item = self._items[index]
        updated = item.model_copy(update={"assigned_to": assignees})
        self._items[index] = updated
        self._logger.log(SessionEventBuilder.item_reassigned(
            self.session_id, item.id, sorted(assignees),
        ))
        self._recompute()
        return updated

    def _recompute(self) -> None:
        self._results = calculate(
            tuple(self._participants),
            tuple(self._items),
            self._tax,
            self._tip,
        )
        self._logger.log(SessionEventBuilder.results_recomputed(
            self.session_id,
            len(self._participants),
            len(self._items),
            self.settled_total,
        ))
