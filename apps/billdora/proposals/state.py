from __future__ import annotations

from typing import Optional

from .models import ProposalNotification, QuoteStatus, ResponseType


class QuoteStateError(ValueError):
    pass


# Client response -> status stored on the proposal response row.
RESPONSE_STATUS: dict[ResponseType, str] = {
    ResponseType.ACCEPT: "accepted",
    ResponseType.CHANGES: "changes_requested",
    ResponseType.DISCUSS: "discussion_requested",
    ResponseType.LATER: "deferred",
    ResponseType.DECLINE: "declined",
}

# Quotes a client can still respond to; a client may respond again until they accept.
OPEN_FOR_RESPONSE = frozenset(
    {
        QuoteStatus.SENT,
        QuoteStatus.CHANGES_REQUESTED,
        QuoteStatus.DISCUSSION_REQUESTED,
        QuoteStatus.DEFERRED,
    }
)


def can_transition(current: QuoteStatus, new: QuoteStatus) -> bool:
    allowed: dict[QuoteStatus, set[QuoteStatus]] = {
        QuoteStatus.DRAFT: {QuoteStatus.SENT},
        QuoteStatus.SENT: {
            QuoteStatus.APPROVED,
            QuoteStatus.DECLINED,
            QuoteStatus.CHANGES_REQUESTED,
            QuoteStatus.DISCUSSION_REQUESTED,
            QuoteStatus.DEFERRED,
        },
        QuoteStatus.CHANGES_REQUESTED: {QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.APPROVED, QuoteStatus.DECLINED},
        QuoteStatus.DISCUSSION_REQUESTED: {QuoteStatus.SENT, QuoteStatus.APPROVED, QuoteStatus.DECLINED},
        QuoteStatus.DEFERRED: {QuoteStatus.SENT, QuoteStatus.APPROVED, QuoteStatus.DECLINED},
        QuoteStatus.APPROVED: set(),
        QuoteStatus.DECLINED: set(),
    }
    return new in allowed.get(current, set())


def assert_transition(current: QuoteStatus, new: QuoteStatus) -> None:
    if current == new:
        return
    if not can_transition(current, new):
        raise QuoteStateError(f"Invalid quote transition: {current.value} -> {new.value}")


def apply_response(current: QuoteStatus, response_type: ResponseType, *, signer_name: Optional[str] = None) -> QuoteStatus:
    """Validate a client response against the quote and return the quote's next status.

    Only an acceptance moves the quote (to approved); other responses are
    recorded on the response row and leave the quote where it is.
    """
    if response_type == ResponseType.ACCEPT and not (signer_name or "").strip():
        raise QuoteStateError("A signer name is required to accept a proposal")
    if current not in OPEN_FOR_RESPONSE:
        raise QuoteStateError(f"Quote is not open for responses: {current.value}")
    if response_type == ResponseType.ACCEPT:
        assert_transition(current, QuoteStatus.APPROVED)
        return QuoteStatus.APPROVED
    return current


def build_response_notification(
    *,
    response_type: ResponseType,
    client_name: Optional[str] = None,
    quote_number: Optional[str] = None,
    quote_title: Optional[str] = None,
    quote_id: Optional[str] = None,
) -> ProposalNotification:
    name = (client_name or "").strip() or "Client"
    number = quote_number or ""
    title = quote_title or "Untitled"

    if response_type == ResponseType.ACCEPT:
        return ProposalNotification(
            type="proposal_signed",
            title="Proposal Signed!",
            message=f"{name} signed proposal #{number} - {title}",
            reference_id=quote_id,
        )
    if response_type == ResponseType.DECLINE:
        return ProposalNotification(
            type="proposal_declined",
            title="Proposal Declined",
            message=f"{name} declined proposal #{number}",
            reference_id=quote_id,
        )
    return ProposalNotification(
        type="proposal_response",
        title="Proposal Response",
        message=f"{name} responded to proposal #{number}",
        reference_id=quote_id,
    )
