from __future__ import annotations

from fastapi import APIRouter

from .limits import check_limit, is_pro, is_starter
from .models import LimitCheckRequest, LimitCheckResult, Plan, PlanTierResponse


router = APIRouter(prefix="/subscriptions", tags=["Subscriptions"])


@router.post("/check-limit", response_model=LimitCheckResult)
async def subscriptions_check_limit(req: LimitCheckRequest):
    return check_limit(req.plan, req.limit_type, req.current_count)


@router.post("/tier", response_model=PlanTierResponse)
async def subscriptions_tier(plan: Plan | None = None):
    return PlanTierResponse(is_pro=is_pro(plan), is_starter=is_starter(plan))
