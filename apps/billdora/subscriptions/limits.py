"""
Plan limits for subscription-based feature gating.
"""

from __future__ import annotations

from typing import Optional

from .models import LimitCheckResult, LimitType, Plan

UNLIMITED = -1

_LIMIT_NAMES = {
    LimitType.PROJECTS: "projects",
    LimitType.TEAM_MEMBERS: "team members",
    LimitType.CLIENTS: "clients",
    LimitType.INVOICES: "invoices this month",
}


def get_limit(plan: Optional[Plan], limit_type: LimitType) -> Optional[int]:
    """Raw limit configured on the plan for limit_type. None when the plan has no limits."""
    if plan is None or plan.limits is None:
        return None
    limits = plan.limits
    if limit_type == LimitType.PROJECTS:
        return limits.projects
    if limit_type == LimitType.TEAM_MEMBERS:
        return limits.team_members
    if limit_type == LimitType.CLIENTS:
        return limits.clients
    if limit_type == LimitType.INVOICES:
        return limits.invoices_per_month
    return None


def limit_message(plan: Optional[Plan], limit_type: LimitType, limit: Optional[int]) -> str:
    plan_name = (plan.name if plan else "") or "Starter"
    return (
        f"You have reached the maximum of {limit} {_LIMIT_NAMES[limit_type]} on the {plan_name} plan. "
        "Upgrade to Professional for more."
    )


def check_limit(plan: Optional[Plan], limit_type: LimitType, current_count: int) -> LimitCheckResult:
    """
    Check whether one more item of limit_type fits in the plan.

    A plan without limits allows nothing; a limit of None or -1 is unlimited.
    """
    if plan is None or plan.limits is None:
        return LimitCheckResult(
            allowed=False,
            message="Please select a plan to continue.",
        )

    limit = get_limit(plan, limit_type)
    if limit is None or limit == UNLIMITED:
        return LimitCheckResult(allowed=True)

    count = int(current_count)
    allowed = count < limit
    return LimitCheckResult(
        allowed=allowed,
        limit=limit,
        remaining=max(limit - count, 0),
        message=None if allowed else limit_message(plan, limit_type, limit),
    )


def is_pro(plan: Optional[Plan]) -> bool:
    return bool(plan and "professional" in (plan.name or "").lower())


def is_starter(plan: Optional[Plan]) -> bool:
    if is_pro(plan):
        return False
    return plan is None or plan.name == "Starter" or float(plan.amount or 0) == 0
