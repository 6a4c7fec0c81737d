from __future__ import annotations

import re

from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.billdora.proposals import router as proposals_router


def _make_app():
    app = FastAPI()
    app.include_router(proposals_router)
    return app


def _items():
    return [
        {"id": "A", "description": "Design", "unit_price": 100, "quantity": 2, "taxed": True, "estimated_days": 3},
        {
            "id": "B",
            "description": "Build",
            "unit_price": 50,
            "quantity": 1,
            "estimated_days": 2,
            "start_type": "sequential",
            "depends_on": "A",
        },
    ]


def test_timeline_endpoint():
    client = TestClient(_make_app())
    res = client.post("/proposals/timeline", json={"items": _items(), "start_date": "2025-03-03"})
    assert res.status_code == 200
    body = res.json()
    assert body["total_days"] == 5
    assert body["summary_value"] == "5 days"
    assert [b["item_id"] for b in body["bars"]] == ["A", "B"]
    assert body["bars"][1]["left_percent"] == 60.0
    assert body["end_date"] == "2025-03-07"


def test_offsets_endpoint_reports_cycles():
    items = _items()
    items[0].update({"start_type": "sequential", "depends_on": "B"})
    client = TestClient(_make_app())
    res = client.post("/proposals/offsets", json={"items": items})
    assert res.status_code == 200
    body = res.json()
    assert body["offsets"] == {"A": 5, "B": 5}
    assert body["cyclic_item_ids"] == ["A", "B"]


def test_dependency_options_endpoint():
    client = TestClient(_make_app())
    res = client.post("/proposals/dependency-options", json={"items": _items(), "item_id": "B"})
    assert res.status_code == 200
    body = res.json()
    assert body["selected"] == "sequential:A"
    assert [o["value"] for o in body["options"]] == ["parallel", "sequential:A", "overlap:A"]

    res = client.post("/proposals/dependency-options", json={"items": _items(), "item_id": "Z"})
    assert res.status_code == 404


def test_link_endpoint_with_choice():
    client = TestClient(_make_app())
    res = client.post("/proposals/link", json={"items": _items(), "item_id": "B", "choice": "overlap:A"})
    assert res.status_code == 200
    b = res.json()[1]
    assert b["start_type"] == "overlap"
    assert b["depends_on"] == "A"
    assert b["overlap_days"] == 2


def test_link_endpoint_rejects_cycle():
    client = TestClient(_make_app())
    res = client.post(
        "/proposals/link",
        json={"items": _items(), "item_id": "A", "start_type": "sequential", "depends_on": "B"},
    )
    assert res.status_code == 400
    assert "Circular" in res.json()["detail"]

    res = client.post("/proposals/link", json={"items": _items(), "item_id": "A"})
    assert res.status_code == 400


def test_totals_endpoint():
    client = TestClient(_make_app())
    res = client.post("/proposals/totals", json={"items": _items(), "tax_rate": 10, "other_charges": 5})
    assert res.status_code == 200
    body = res.json()
    assert body["subtotal"] == 250.0
    assert body["tax_due"] == 20.0
    assert body["total"] == 275.0
    assert [r["description"] for r in body["rows"]] == ["Design", "Build"]
    assert body["rows"][0]["amount"] == 200.0
    assert body["rows"][1]["start_type"] == "sequential"


def test_quote_number_endpoint():
    client = TestClient(_make_app())
    res = client.get("/proposals/quote-number")
    assert res.status_code == 200
    assert re.fullmatch(r"\d{6}-\d{3}", res.json()["quote_number"])


def test_links_endpoint():
    client = TestClient(_make_app())
    res = client.post("/proposals/links", json={"valid_until": "2025-06-30", "portal_url": "https://app.example.com"})
    assert res.status_code == 200
    body = res.json()
    assert len(body["token"]) == 64
    assert len(body["access_code"]) == 4
    assert body["url"] == f"https://app.example.com/proposal/{body['token']}"
    assert body["expires_at"] == "2025-06-30T00:00:00"


def test_response_preview_accept():
    client = TestClient(_make_app())
    res = client.post(
        "/proposals/responses/preview",
        json={
            "response_type": "accept",
            "quote_id": "q1",
            "quote_number": "250102-001",
            "quote_title": "Kitchen Remodel",
            "client_name": "Jane Doe",
            "signer_name": "Jane Doe",
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["response_status"] == "accepted"
    assert body["quote_status"] == "approved"
    assert body["send_signed_confirmation"] is True
    assert body["notification"]["type"] == "proposal_signed"


def test_response_preview_rejects_missing_signer_and_bad_state():
    client = TestClient(_make_app())
    res = client.post("/proposals/responses/preview", json={"response_type": "accept"})
    assert res.status_code == 400

    res = client.post("/proposals/responses/preview", json={"response_type": "decline", "quote_status": "approved"})
    assert res.status_code == 400

    res = client.post("/proposals/responses/preview", json={"response_type": "later"})
    assert res.status_code == 200
    assert res.json()["quote_status"] == "sent"
    assert res.json()["send_signed_confirmation"] is False


def test_response_preview_accepts_after_changes_requested():
    client = TestClient(_make_app())
    res = client.post(
        "/proposals/responses/preview",
        json={"response_type": "accept", "quote_status": "changes_requested", "signer_name": "Ann"},
    )
    assert res.status_code == 200
    assert res.json()["quote_status"] == "approved"
