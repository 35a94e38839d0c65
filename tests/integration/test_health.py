"""Tests for the health and metrics endpoints and startup seeding."""

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from src.director import main
from src.director.core.config import Settings
from src.director.repositories import AutomationStore
from tests.helpers import create_automation

pytestmark = pytest.mark.integration


@pytest.fixture
def patched_settings(monkeypatch):
    """Install settings for create_app and the lifespan without touching the env."""

    def install(**overrides) -> Settings:
        settings = Settings(**overrides)
        monkeypatch.setattr(main, "get_settings", lambda: settings)
        # Leave the global structlog configuration alone
        monkeypatch.setattr(main, "setup_logging", lambda debug=False: None)
        return settings

    return install


async def test_health_reports_store_size(client: AsyncClient):
    response = await client.get("/health")
    assert response.json() == {"status": "healthy", "automations": 0}

    await create_automation(client)

    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["automations"] == 1


async def test_metrics_exposed(client: AsyncClient):
    await client.get("/health")

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


async def test_metrics_require_key_when_configured(patched_settings):
    patched_settings(metrics_api_key="metrics-secret")
    app = main.create_app(AutomationStore())

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        denied = await client.get("/metrics")
        allowed = await client.get("/metrics", headers={"X-Metrics-Key": "metrics-secret"})

    assert denied.status_code == 401
    assert "request_id" in denied.json()
    assert allowed.status_code == 200


def test_startup_seeds_demo_automation(patched_settings):
    patched_settings(seed_demo_data=True)
    store = AutomationStore()

    with TestClient(main.create_app(store)) as client:
        automations = client.get("/api/v1/automations").json()

    assert [a["name"] for a in automations] == ["Creator Growth Sprint"]
    assert automations[0]["crossPost"] == ["TikTok", "LinkedIn"]


def test_startup_seeding_disabled_by_default(patched_settings):
    patched_settings()
    store = AutomationStore()

    with TestClient(main.create_app(store)):
        pass

    assert store.count() == 0
