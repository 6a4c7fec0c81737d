from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class StartType(str, Enum):
    PARALLEL = "parallel"
    SEQUENTIAL = "sequential"
    OVERLAP = "overlap"


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    DECLINED = "declined"
    CHANGES_REQUESTED = "changes_requested"
    DISCUSSION_REQUESTED = "discussion_requested"
    DEFERRED = "deferred"


class ResponseType(str, Enum):
    ACCEPT = "accept"
    CHANGES = "changes"
    DISCUSS = "discuss"
    LATER = "later"
    DECLINE = "decline"


class LineItem(BaseModel):
    id: str
    description: str = ""
    unit_price: float = Field(default=0.0, ge=0)
    quantity: float = Field(default=1.0, gt=0)
    unit: str = "each"
    taxed: bool = False

    # Scheduling
    estimated_days: int = Field(default=1, ge=1)
    start_offset: int = Field(default=0, ge=0)  # manual offset persisted with the row
    depends_on: str = ""  # '' = starts day 1
    start_type: StartType = StartType.PARALLEL
    overlap_days: float = Field(default=0.0, ge=0)

    # Rows saved before scheduling existed come back with nulls for these columns.
    @field_validator("depends_on", "description", "unit", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value)

    @field_validator("start_type", mode="before")
    @classmethod
    def _coerce_start_type(cls, value: Any) -> Any:
        if value is None or value == "":
            return StartType.PARALLEL
        return value

    @field_validator("estimated_days", mode="before")
    @classmethod
    def _coerce_estimated_days(cls, value: Any) -> Any:
        if value in (None, "", 0, "0"):
            return 1
        return value

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, value: Any) -> Any:
        if value in (None, "", 0, "0"):
            return 1.0
        return value

    @field_validator("start_offset", "overlap_days", "unit_price", mode="before")
    @classmethod
    def _coerce_zero(cls, value: Any) -> Any:
        if value is None or value == "":
            return 0
        return value

    def dependency_id(self) -> Optional[str]:
        """The item this one waits on, or None when it starts on day 1."""
        if self.start_type == StartType.PARALLEL:
            return None
        dep = (self.depends_on or "").strip()
        return dep or None

    def is_schedulable(self) -> bool:
        return bool((self.description or "").strip())


class LineItemsRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)


class OffsetsResponse(BaseModel):
    offsets: Dict[str, int]
    cyclic_item_ids: List[str] = Field(default_factory=list)


class TimelineRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    start_date: Optional[date] = None


class TimelineBar(BaseModel):
    item_id: str
    label: str
    description: str
    start_day: int
    end_day: int
    estimated_days: int
    duration_label: str
    left_percent: float
    width_percent: float
    display_width_percent: float
    color_index: int

    start_date: Optional[date] = None
    end_date: Optional[date] = None


class Timeline(BaseModel):
    total_days: int
    header_labels: List[str]
    bars: List[TimelineBar]
    summary_label: str = "Total Project Duration"
    summary_value: str
    cyclic_item_ids: List[str] = Field(default_factory=list)

    start_date: Optional[date] = None
    end_date: Optional[date] = None


class DependencyOptionsRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    item_id: str


class DependencyOption(BaseModel):
    value: str  # "parallel" or "<start_type>:<item_id>", as the editor's select uses
    label: str
    start_type: StartType
    item_id: Optional[str] = None
    group: Optional[str] = None


class DependencyOptionsResponse(BaseModel):
    item_id: str
    selected: str
    options: List[DependencyOption]


class LinkDependencyRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    item_id: str

    # Either a raw select value ("parallel", "sequential:<id>", "overlap:<id>")
    # or the explicit start_type/depends_on pair.
    choice: Optional[str] = None
    start_type: Optional[StartType] = None
    depends_on: Optional[str] = None
    overlap_days: Optional[float] = Field(default=None, ge=0)


class TotalsRequest(BaseModel):
    items: List[LineItem] = Field(default_factory=list)
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    other_charges: float = 0.0


class QuoteTotals(BaseModel):
    subtotal: float
    taxable_amount: float
    tax_rate: float
    tax_due: float
    other_charges: float
    total: float

    # Described line items as persisted with the quote.
    rows: List[Dict[str, Any]] = Field(default_factory=list)


class QuoteNumberResponse(BaseModel):
    quote_number: str


class ProposalResponseRequest(BaseModel):
    quote_status: QuoteStatus = QuoteStatus.SENT
    response_type: ResponseType

    quote_id: Optional[str] = None
    quote_number: Optional[str] = None
    quote_title: Optional[str] = None
    client_name: Optional[str] = None

    signer_name: Optional[str] = None
    signer_title: Optional[str] = None
    comments: Optional[str] = None


class ProposalNotification(BaseModel):
    type: str
    title: str
    message: str
    reference_id: Optional[str] = None
    reference_type: str = "quote"
    is_read: bool = False


class ProposalResponsePreview(BaseModel):
    response_status: str
    quote_status: QuoteStatus
    notification: ProposalNotification
    send_signed_confirmation: bool = False


class ProposalLinkRequest(BaseModel):
    valid_until: Optional[str] = None
    portal_url: Optional[str] = None


class ProposalLinkResponse(BaseModel):
    token: str
    access_code: str
    url: str
    expires_at: str
