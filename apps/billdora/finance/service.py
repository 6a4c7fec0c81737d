from __future__ import annotations

import time
from typing import List, Optional, Tuple

from .models import AgingBucket, FinanceAgingResponse, FinanceSummaryResponse, InvoiceRecord, InvoiceStatus


_DAY = 86400.0

# (label, min days past due, max days past due inclusive)
_AGING_BUCKETS: List[Tuple[str, int, Optional[int]]] = [
    ("Current", 0, 0),
    ("1-30", 1, 30),
    ("31-60", 31, 60),
    ("61-90", 61, 90),
    ("90+", 91, None),
]


def _now() -> float:
    return float(time.time())


def _remaining(inv: InvoiceRecord) -> float:
    return max(0.0, float(inv.total or 0) - float(inv.amount_paid or 0))


def _is_closed(inv: InvoiceRecord) -> bool:
    return inv.status in {InvoiceStatus.PAID, InvoiceStatus.VOID}


def _is_overdue(inv: InvoiceRecord, now: float) -> bool:
    if inv.status == InvoiceStatus.OVERDUE:
        return True
    return bool(inv.due_date and float(inv.due_date) < now and inv.status != InvoiceStatus.DRAFT)


def compute_summary(*, invoices: List[InvoiceRecord], now: float | None = None) -> FinanceSummaryResponse:
    now = float(_now() if now is None else now)
    outstanding_amount = 0.0
    overdue_amount = 0.0
    paid_amount_30d = 0.0

    open_invoice_count = 0
    overdue_invoice_count = 0
    draft_invoice_count = 0
    sent_invoice_count = 0

    for inv in invoices:
        if inv.status == InvoiceStatus.DRAFT:
            draft_invoice_count += 1
        # The dashboard counts paid invoices as sent too.
        if inv.status in {InvoiceStatus.SENT, InvoiceStatus.PAID}:
            sent_invoice_count += 1

        if _is_closed(inv):
            if inv.status == InvoiceStatus.PAID and inv.paid_at and float(inv.paid_at) >= now - 30.0 * _DAY:
                paid_amount_30d += float(inv.amount_paid or inv.total or 0)
            continue

        if inv.status == InvoiceStatus.DRAFT:
            continue

        # Open invoice
        remaining = _remaining(inv)
        open_invoice_count += 1
        outstanding_amount += remaining

        if _is_overdue(inv, now):
            overdue_invoice_count += 1
            overdue_amount += remaining

    return FinanceSummaryResponse(
        outstanding_amount=round(outstanding_amount, 2),
        overdue_amount=round(overdue_amount, 2),
        paid_amount_30d=round(paid_amount_30d, 2),
        open_invoice_count=int(open_invoice_count),
        overdue_invoice_count=int(overdue_invoice_count),
        draft_invoice_count=int(draft_invoice_count),
        sent_invoice_count=int(sent_invoice_count),
    )


def compute_aging(*, invoices: List[InvoiceRecord], now: float | None = None) -> FinanceAgingResponse:
    """Bucket open balances by whole days past due; invoices without a due date count as current."""
    now = float(_now() if now is None else now)
    buckets = [AgingBucket(label=label, min_days=lo, max_days=hi) for label, lo, hi in _AGING_BUCKETS]
    total = 0.0

    for inv in invoices:
        if _is_closed(inv) or inv.status == InvoiceStatus.DRAFT:
            continue
        remaining = _remaining(inv)
        if remaining <= 0:
            continue

        days_late = 0
        if inv.due_date and float(inv.due_date) < now:
            days_late = max(1, int((now - float(inv.due_date)) // _DAY))

        for bucket in buckets:
            if days_late >= bucket.min_days and (bucket.max_days is None or days_late <= bucket.max_days):
                bucket.amount += remaining
                bucket.invoice_count += 1
                break
        total += remaining

    for bucket in buckets:
        bucket.amount = round(bucket.amount, 2)
    return FinanceAgingResponse(buckets=buckets, total_outstanding=round(total, 2))
