from __future__ import annotations

import secrets
import uuid
from datetime import datetime, timedelta
from typing import Any, Optional

from ..settings import settings
from ..utils import parse_any_date, utcnow


def generate_proposal_token() -> str:
    # Two uuid4 hex strings, 64 chars, used in /proposal/<token> links.
    return uuid.uuid4().hex + uuid.uuid4().hex


def generate_access_code() -> str:
    return str(1000 + secrets.randbelow(9000))


def proposal_expiry(valid_until: Any = None, *, now: Optional[datetime] = None) -> datetime:
    """When a sent proposal link stops working.

    Uses the quote's valid_until when it parses, otherwise PROPOSAL_VALIDITY_DAYS from now.
    """
    parsed = parse_any_date(valid_until)
    if parsed is not None:
        return parsed
    now = now or utcnow()
    return now + timedelta(days=int(settings.PROPOSAL_VALIDITY_DAYS))


def is_expired(expires_at: Any, *, now: Optional[datetime] = None) -> bool:
    parsed = parse_any_date(expires_at)
    if parsed is None:
        return False
    return parsed < (now or utcnow())


def proposal_link(token: str, *, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.FRONTEND_BASE_URL).rstrip("/")
    return f"{base}/proposal/{token}"
