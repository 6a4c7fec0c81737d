from __future__ import annotations

from fastapi import APIRouter

from .models import FinanceAgingResponse, FinanceSummaryResponse, InvoicesRequest
from .service import compute_aging, compute_summary


router = APIRouter(prefix="/finance", tags=["Finance"])


@router.post("/summary", response_model=FinanceSummaryResponse)
async def finance_summary(req: InvoicesRequest):
    return compute_summary(invoices=req.invoices, now=req.now)


@router.post("/aging", response_model=FinanceAgingResponse)
async def finance_aging(req: InvoicesRequest):
    return compute_aging(invoices=req.invoices, now=req.now)
