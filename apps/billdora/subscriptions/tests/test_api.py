from __future__ import annotations

from fastapi import FastAPI
from fastapi.testclient import TestClient

from apps.billdora.subscriptions import router as subscriptions_router


def _make_app():
    app = FastAPI()
    app.include_router(subscriptions_router)
    return app


def test_check_limit_endpoint():
    client = TestClient(_make_app())
    plan = {"name": "Starter", "amount": 0, "limits": {"projects": 3}}

    res = client.post("/subscriptions/check-limit", json={"plan": plan, "limit_type": "projects", "current_count": 3})
    assert res.status_code == 200
    body = res.json()
    assert body["allowed"] is False
    assert body["limit"] == 3
    assert "Upgrade to Professional" in body["message"]

    res = client.post("/subscriptions/check-limit", json={"limit_type": "clients"})
    assert res.status_code == 200
    assert res.json()["allowed"] is False


def test_check_limit_rejects_negative_count():
    client = TestClient(_make_app())
    res = client.post("/subscriptions/check-limit", json={"limit_type": "projects", "current_count": -1})
    assert res.status_code == 422


def test_tier_endpoint():
    client = TestClient(_make_app())
    res = client.post("/subscriptions/tier", json={"name": "Professional", "amount": 49})
    assert res.status_code == 200
    assert res.json() == {"is_pro": True, "is_starter": False}


def test_tier_endpoint_without_plan():
    client = TestClient(_make_app())
    res = client.post("/subscriptions/tier")
    assert res.status_code == 200
    assert res.json() == {"is_pro": False, "is_starter": True}
    schema = client.get("/openapi.json").json()["components"]["schemas"]
    assert "PlanTierResponse" in schema
