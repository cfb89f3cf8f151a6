"""Store failure handling: SQL error translation and HTTP status mapping."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from shortlinks.dependencies import get_link_store
from shortlinks.exceptions import StoreError
from shortlinks.main import app
from shortlinks.models import Link, utcnow
from shortlinks.store import LinkStore, SQLAlchemyLinkStore


class UnavailableStore(LinkStore):
    async def insert(self, link: Link) -> Link:
        raise StoreError("Failed to create link")

    async def record_click(self, code: str) -> str:
        raise StoreError("Failed to record click")

    async def list_all(self) -> list[Link]:
        raise StoreError("Failed to fetch links")

    async def get(self, code: str) -> Link:
        raise StoreError("Failed to fetch link")

    async def delete(self, code: str) -> bool:
        raise StoreError("Failed to delete link")


@pytest_asyncio.fixture
async def broken_client() -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_link_store] = lambda: UnavailableStore()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.mark.asyncio
async def test_create_link_store_failure(broken_client: AsyncClient) -> None:
    response = await broken_client.post("/api/links", json={"url": "https://example.com"})

    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to create short URL"}


@pytest.mark.asyncio
async def test_validation_precedes_store_failure(broken_client: AsyncClient) -> None:
    response = await broken_client.post("/api/links", json={"url": "nope"})

    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "method,path",
    [("GET", "/api/links"), ("GET", "/api/links/abc123"), ("DELETE", "/api/links/abc123")],
)
async def test_api_store_failure(broken_client: AsyncClient, method, path) -> None:
    response = await broken_client.request(method, path)

    assert response.status_code == 500


@pytest.mark.asyncio
async def test_redirect_store_failure(broken_client: AsyncClient) -> None:
    response = await broken_client.get("/abc123", follow_redirects=False)

    assert response.status_code == 500
    assert response.text == "Server error"


@pytest.mark.asyncio
async def test_sql_store_wraps_driver_errors(tmp_path) -> None:
    # No tables created, so every statement fails at the driver.
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
    store = SQLAlchemyLinkStore(async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False))
    try:
        with pytest.raises(StoreError):
            await store.get("abc123")
        with pytest.raises(StoreError):
            await store.record_click("abc123")
        with pytest.raises(StoreError):
            await store.insert(Link(code="abc123", target_url="https://example.com", clicks=0, created_at=utcnow()))
    finally:
        await engine.dispose()
