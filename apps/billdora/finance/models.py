from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional
from pydantic import BaseModel, Field, field_validator

from ..utils import parse_any_date


_EPOCH = datetime(1970, 1, 1)


class InvoiceStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    VOID = "void"


class InvoiceRecord(BaseModel):
    invoice_id: str
    invoice_number: str = ""
    client_id: Optional[str] = None

    status: InvoiceStatus = InvoiceStatus.DRAFT

    subtotal: float = 0.0
    tax_amount: float = 0.0
    total: float = 0.0
    amount_paid: float = 0.0

    # Epoch seconds; ISO strings from the database are accepted too.
    due_date: Optional[float] = None
    sent_date: Optional[float] = None
    paid_at: Optional[float] = None
    created_at: Optional[float] = None

    @field_validator("due_date", "sent_date", "paid_at", "created_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Optional[float]:
        if value is None or value == "":
            return None
        if isinstance(value, (int, float)):
            return float(value)
        dt = parse_any_date(value)
        if dt is None:
            raise ValueError(f"Invalid date: {value!r}")
        # parse_any_date returns naive UTC.
        return (dt - _EPOCH).total_seconds()

    @field_validator("amount_paid", "subtotal", "tax_amount", "total", mode="before")
    @classmethod
    def _coerce_amount(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0.0
        return value


class InvoicesRequest(BaseModel):
    invoices: List[InvoiceRecord] = Field(default_factory=list)
    now: Optional[float] = None


class FinanceSummaryResponse(BaseModel):
    outstanding_amount: float
    overdue_amount: float
    paid_amount_30d: float

    open_invoice_count: int
    overdue_invoice_count: int
    draft_invoice_count: int
    sent_invoice_count: int


class AgingBucket(BaseModel):
    label: str
    min_days: int
    max_days: Optional[int] = None
    amount: float = 0.0
    invoice_count: int = 0


class FinanceAgingResponse(BaseModel):
    buckets: List[AgingBucket]
    total_outstanding: float
