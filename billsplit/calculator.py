"""
Settlement Calculator

DESIGN DECISION: The calculation is a PURE function of a snapshot.
The session hands over its participants, items, tax and tip; this module
returns fresh SettlementRecords and keeps nothing.

Allocation rules:
- An item's price is split evenly between its assignees
- Tax and tip are split in proportion to each participant's subtotal
- Items nobody is assigned to count toward the bill but toward no one;
  their cost is NOT redistributed

No rounding happens here. Rounding is a display concern (see export.py).
"""

from decimal import Decimal
from typing import Iterable, Sequence

from billsplit.models.split import LineItem, Participant, SettlementRecord, to_decimal

ZERO = Decimal("0")


def items_subtotal(items: Iterable[LineItem]) -> Decimal:
    """Sum of all item prices, assigned or not."""
    return sum((item.price for item in items), ZERO)


def grand_total(items: Iterable[LineItem], tax: Decimal, tip: Decimal) -> Decimal:
    """The whole bill: every item plus tax and tip."""
    return items_subtotal(items) + Decimal(to_decimal(tax)) + Decimal(to_decimal(tip))


def calculate(
    participants: Sequence[Participant],
    items: Sequence[LineItem],
    tax: Decimal,
    tip: Decimal,
) -> list[SettlementRecord]:
    """
    Allocate a bill between participants.

    Returns one record per participant, in the order given. Never raises
    for well-typed input: unknown ids in `assigned_to` are ignored, an
    empty or all-free bill yields zero shares, and negative tax/tip are
    carried through arithmetically (rejecting them is the caller's job).
    """
    tax = Decimal(to_decimal(tax))
    tip = Decimal(to_decimal(tip))

    subtotals = {p.id: ZERO for p in participants}
    consumed: dict[str, list[LineItem]] = {p.id: [] for p in participants}

    total_item_cost = items_subtotal(items)

    for item in items:
        if not item.assigned_to:
            continue
        share = item.price / item.share_count
        for participant_id in item.assigned_to:
            if participant_id not in subtotals:
                continue
            subtotals[participant_id] += share
            consumed[participant_id].append(item)

    records = []
    for participant in participants:
        subtotal = subtotals[participant.id]
        if total_item_cost > 0:
            proportion = subtotal / total_item_cost
        else:
            proportion = ZERO
        tax_share = tax * proportion
        tip_share = tip * proportion
        records.append(SettlementRecord(
            participant_id=participant.id,
            name=participant.name,
            subtotal=subtotal,
            tax_share=tax_share,
            tip_share=tip_share,
            total=subtotal + tax_share + tip_share,
            assigned_items=list(consumed[participant.id]),
        ))

    return records
