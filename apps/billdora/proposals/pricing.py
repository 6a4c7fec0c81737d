from __future__ import annotations

import random
from datetime import datetime
from typing import List, Optional

from ..settings import settings
from .models import LineItem, QuoteTotals


DEFAULT_TERMS = """1. Customer will be invoiced upon acceptance of this quote.
2. Payment is due within 30 days of invoice date.
3. This quote is valid for the period specified above.
4. Any changes to scope may result in price adjustments.
5. Please sign and return this quote to proceed with the project."""


def line_amount(item: LineItem) -> float:
    return float(item.unit_price or 0) * float(item.quantity or 1)


def compute_totals(
    items: List[LineItem],
    *,
    tax_rate: Optional[float] = None,
    other_charges: float = 0.0,
) -> QuoteTotals:
    rate = float(settings.DEFAULT_TAX_RATE if tax_rate is None else tax_rate)

    subtotal = sum(line_amount(item) for item in items)
    taxable_amount = sum(line_amount(item) for item in items if item.taxed)
    tax_due = taxable_amount * (rate / 100.0)
    total = subtotal + tax_due + float(other_charges or 0)

    return QuoteTotals(
        subtotal=round(subtotal, 2),
        taxable_amount=round(taxable_amount, 2),
        tax_rate=rate,
        tax_due=round(tax_due, 2),
        other_charges=round(float(other_charges or 0), 2),
        total=round(total, 2),
    )


def billable_items(items: List[LineItem]) -> List[dict]:
    """Rows as they are persisted to quote_line_items: described items only."""
    out: List[dict] = []
    for item in items:
        description = (item.description or "").strip()
        if not description:
            continue
        out.append(
            {
                "description": description,
                "unit_price": float(item.unit_price or 0),
                "quantity": float(item.quantity or 1),
                "unit": item.unit or "each",
                "taxed": bool(item.taxed),
                "amount": round(line_amount(item), 2),
                "estimated_days": int(item.estimated_days or 1),
                "start_offset": int(item.start_offset or 0),
                "depends_on": item.depends_on or "",
                "start_type": item.start_type.value,
                "overlap_days": float(item.overlap_days or 0),
            }
        )
    return out


def generate_quote_number(now: Optional[datetime] = None) -> str:
    """Generate a quote number in the format YYMMDD-XXX (e.g. 250102-001)."""
    now = now or datetime.now()
    seq = random.randint(1, 999)
    return f"{now.strftime('%y%m%d')}-{seq:03d}"
