"""
Summary Export

Renders a computed settlement as the plain-text summary people paste into
a group chat:

    🧾 BILL SPLIT: TEAM LUNCH
    👤 PAYER: ALICE

    BOB
    Owes ALICE: $19
    Items: Lunch
    Breakdown: Sub $15.00 | Tax $1.50 | Tip $2.25

    TOTAL BILL: $50.00

DESIGN DECISION: This is the ONLY place amounts are rounded.
Rounded figures are for reading; they are never fed back into a
calculation, so the rounded per-person amounts may not add up to the
rounded total.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from billsplit.models.split import Currency, Participant, SettlementRecord

WHOLE = Decimal("1")


def round_amount(amount: Decimal, places: int = 2) -> Decimal:
    """Round half-up to a number of decimal places (0 = whole units)."""
    exponent = WHOLE if places == 0 else Decimal(1).scaleb(-places)
    return Decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal, currency: Currency, places: int = 2) -> str:
    """Symbol plus the amount rounded for display, e.g. '$18.75' or '₹19'."""
    return f"{currency.symbol}{round_amount(amount, places)}"


def _owes_line(record: SettlementRecord, payer: Optional[Participant], currency: Currency) -> str:
    amount = format_money(record.total, currency, places=0)
    if payer is None:
        return f"Owes: {amount}"
    return f"Owes {payer.name.upper()}: {amount}"


def _breakdown_line(record: SettlementRecord, currency: Currency) -> str:
    return (
        f"Breakdown: Sub {format_money(record.subtotal, currency)}"
        f" | Tax {format_money(record.tax_share, currency)}"
        f" | Tip {format_money(record.tip_share, currency)}"
    )


def build_summary_text(
    split_name: str,
    results: Sequence[SettlementRecord],
    payer: Optional[Participant],
    currency: Currency,
) -> str:
    """
    Build the copy/paste summary of a settlement.

    The payer's own record is left out: they owe nobody. Without a payer
    the PAYER line is omitted and everyone is listed with a bare
    "Owes:" line.
    """
    lines = [f"🧾 BILL SPLIT: {split_name.upper()}"]
    if payer is not None:
        lines.append(f"👤 PAYER: {payer.name.upper()}")
    lines.append("")

    for record in results:
        if payer is not None and record.participant_id == payer.id:
            continue
        lines.append(record.name.upper())
        lines.append(_owes_line(record, payer, currency))
        lines.append(f"Items: {', '.join(record.item_names) or 'None'}")
        lines.append(_breakdown_line(record, currency))
        lines.append("")

    total_bill = sum((record.total for record in results), Decimal("0"))
    lines.append(f"TOTAL BILL: {format_money(total_bill, currency)}")

    return "\n".join(lines)
