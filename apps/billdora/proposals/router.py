from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException

from ..utils import to_isoformat
from .links import generate_access_code, generate_proposal_token, proposal_expiry, proposal_link
from .models import (
    DependencyOptionsRequest,
    DependencyOptionsResponse,
    LineItem,
    LineItemsRequest,
    LinkDependencyRequest,
    OffsetsResponse,
    ProposalLinkRequest,
    ProposalLinkResponse,
    ProposalResponsePreview,
    ProposalResponseRequest,
    QuoteNumberResponse,
    QuoteTotals,
    ResponseType,
    Timeline,
    TimelineRequest,
    TotalsRequest,
)
from .pricing import billable_items, compute_totals, generate_quote_number
from .state import RESPONSE_STATUS, apply_response, build_response_notification
from .timeline import (
    TimelineError,
    build_timeline,
    compute_start_offsets,
    cyclic_item_ids,
    dependency_options,
    link_dependency,
    parse_dependency_choice,
    selected_choice,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/proposals", tags=["Proposals"])


@router.post("/timeline", response_model=Timeline)
async def proposals_timeline(req: TimelineRequest):
    return build_timeline(req.items, start_date=req.start_date)


@router.post("/offsets", response_model=OffsetsResponse)
async def proposals_offsets(req: LineItemsRequest):
    return OffsetsResponse(offsets=compute_start_offsets(req.items), cyclic_item_ids=cyclic_item_ids(req.items))


@router.post("/dependency-options", response_model=DependencyOptionsResponse)
async def proposals_dependency_options(req: DependencyOptionsRequest):
    try:
        options = dependency_options(req.items, req.item_id)
    except TimelineError as e:
        raise HTTPException(status_code=404, detail=str(e))
    item = next(i for i in req.items if i.id == req.item_id)
    return DependencyOptionsResponse(item_id=req.item_id, selected=selected_choice(item), options=options)


@router.post("/link", response_model=list[LineItem])
async def proposals_link(req: LinkDependencyRequest):
    try:
        if req.choice is not None:
            start_type, depends_on = parse_dependency_choice(req.choice)
        elif req.start_type is not None:
            start_type, depends_on = req.start_type, req.depends_on
        else:
            raise TimelineError("Provide either choice or start_type")
        return link_dependency(
            req.items,
            item_id=req.item_id,
            start_type=start_type,
            depends_on=depends_on,
            overlap_days=req.overlap_days,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/totals", response_model=QuoteTotals)
async def proposals_totals(req: TotalsRequest):
    totals = compute_totals(req.items, tax_rate=req.tax_rate, other_charges=req.other_charges)
    totals.rows = billable_items(req.items)
    return totals


@router.get("/quote-number", response_model=QuoteNumberResponse)
async def proposals_quote_number():
    return QuoteNumberResponse(quote_number=generate_quote_number())


@router.post("/links", response_model=ProposalLinkResponse)
async def proposals_links(req: ProposalLinkRequest):
    token = generate_proposal_token()
    expires_at = proposal_expiry(req.valid_until)
    return ProposalLinkResponse(
        token=token,
        access_code=generate_access_code(),
        url=proposal_link(token, base_url=req.portal_url),
        expires_at=to_isoformat(expires_at) or "",
    )


@router.post("/responses/preview", response_model=ProposalResponsePreview)
async def proposals_response_preview(req: ProposalResponseRequest):
    try:
        quote_status = apply_response(req.quote_status, req.response_type, signer_name=req.signer_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    notification = build_response_notification(
        response_type=req.response_type,
        client_name=req.client_name,
        quote_number=req.quote_number,
        quote_title=req.quote_title,
        quote_id=req.quote_id,
    )
    logger.info("Proposal %s response %s -> quote %s", req.quote_id or "-", req.response_type.value, quote_status.value)
    return ProposalResponsePreview(
        response_status=RESPONSE_STATUS[req.response_type],
        quote_status=quote_status,
        notification=notification,
        send_signed_confirmation=req.response_type == ResponseType.ACCEPT,
    )
