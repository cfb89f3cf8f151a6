"""Health, page and metrics endpoint tests."""

import pytest
from httpx import AsyncClient

from shortlinks.config import get_settings


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient) -> None:
    response = await client.get("/healthz")

    assert response.status_code == 200
    assert response.json() == {"ok": True, "version": get_settings().APP_VERSION}


@pytest.mark.asyncio
async def test_dashboard_page(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    assert "/api/links" in response.text


@pytest.mark.asyncio
async def test_stats_page_served_for_any_code(client: AsyncClient) -> None:
    response = await client.get("/code/whatever")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")


@pytest.mark.asyncio
async def test_static_assets(client: AsyncClient) -> None:
    response = await client.get("/static/app.css")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_metrics_exposed(client: AsyncClient) -> None:
    await client.post("/api/links", json={"url": "https://example.com"})

    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "shortlinks_creations_total" in response.text
