from __future__ import annotations

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class LimitType(str, Enum):
    PROJECTS = "projects"
    TEAM_MEMBERS = "team_members"
    CLIENTS = "clients"
    INVOICES = "invoices"  # per month


class PlanLimits(BaseModel):
    # None or -1 means unlimited.
    projects: Optional[int] = None
    team_members: Optional[int] = None
    clients: Optional[int] = None
    invoices_per_month: Optional[int] = None


class Plan(BaseModel):
    name: str
    amount: float = 0.0
    limits: Optional[PlanLimits] = None


class LimitCheckRequest(BaseModel):
    plan: Optional[Plan] = None
    limit_type: LimitType
    current_count: int = Field(default=0, ge=0)


class LimitCheckResult(BaseModel):
    allowed: bool
    limit: Optional[int] = None
    remaining: Optional[int] = None
    message: Optional[str] = None


class PlanTierResponse(BaseModel):
    is_pro: bool
    is_starter: bool
