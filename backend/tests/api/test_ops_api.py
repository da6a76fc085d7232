import pytest

from portal.infra import postgres
from portal.settings import settings


@pytest.mark.asyncio
async def test_liveness(api_client):
    response = await api_client.get("/health/live")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert response.headers.get("X-Request-Id")


@pytest.mark.asyncio
async def test_readiness_degrades_without_postgres(api_client, monkeypatch):
    async def broken_pool():
        raise OSError("connection refused")

    monkeypatch.setattr(postgres, "get_pool", broken_pool)

    response = await api_client.get("/health/ready")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "degraded"
    assert body["checks"]["postgres"]["ok"] is False


@pytest.mark.asyncio
async def test_metrics_fail_closed_without_token(api_client, monkeypatch):
    monkeypatch.setattr(settings, "obs_metrics_public", False)
    monkeypatch.setattr(settings, "obs_admin_token", None)

    response = await api_client.get("/metrics", headers={"X-Admin-Token": "whatever"})

    assert response.status_code == 403
    assert response.json()["detail"] == "admin_token_not_configured"


@pytest.mark.asyncio
async def test_metrics_token_checks(api_client, monkeypatch):
    monkeypatch.setattr(settings, "obs_metrics_public", False)
    monkeypatch.setattr(settings, "obs_admin_token", "secret-token")

    wrong = await api_client.get("/metrics", headers={"X-Admin-Token": "wrong"})
    right = await api_client.get("/metrics", headers={"Authorization": "Bearer secret-token"})

    assert wrong.status_code == 403
    assert wrong.json()["detail"] == "forbidden"
    assert right.status_code == 200
    assert "portal_http_requests_total" in right.text


@pytest.mark.asyncio
async def test_errors_carry_request_id(api_client):
    response = await api_client.get("/events", headers={"X-Request-Id": "req-123"})
    assert response.status_code == 401
    assert response.json() == {"detail": "invalid_token", "request_id": "req-123"}


@pytest.mark.asyncio
async def test_malformed_request_id_is_replaced(api_client):
    response = await api_client.get("/health/live", headers={"X-Request-Id": "not an id; drop"})
    issued = response.headers["X-Request-Id"]
    assert issued != "not an id; drop"
    assert len(issued) == 32
