"""Shared pytest fixtures for store, service and API tests."""

from collections.abc import Iterable
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from shortlinks.codes import CodeGenerator
from shortlinks.config import Settings
from shortlinks.database import close_db, create_engine_from_settings, create_session_factory, init_db
from shortlinks.dependencies import get_code_generator, get_link_store
from shortlinks.main import app
from shortlinks.store import InMemoryLinkStore, LinkStore, SQLAlchemyLinkStore


class SequenceCodeGenerator(CodeGenerator):
    """Hands out predetermined codes, in order."""

    def __init__(self, codes: Iterable[str]):
        self._codes = list(codes)
        self.calls: list[int] = []

    def extend(self, *codes: str) -> None:
        self._codes.extend(codes)

    def generate_code(self, length: int) -> str:
        self.calls.append(length)
        if not self._codes:
            raise AssertionError("SequenceCodeGenerator ran out of codes")
        return self._codes.pop(0)


def sqlite_settings(tmp_path) -> Settings:
    return Settings(_env_file=None, DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'links.db'}")


@pytest.fixture
def memory_store() -> InMemoryLinkStore:
    return InMemoryLinkStore()


@pytest_asyncio.fixture
async def sql_store(tmp_path) -> AsyncGenerator[SQLAlchemyLinkStore, None]:
    engine = create_engine_from_settings(sqlite_settings(tmp_path))
    await init_db(engine)
    yield SQLAlchemyLinkStore(create_session_factory(engine))
    await close_db(engine)


@pytest_asyncio.fixture(params=["memory", "sql"])
async def store(request, tmp_path) -> AsyncGenerator[LinkStore, None]:
    """Runs a test once per store implementation."""
    if request.param == "memory":
        yield InMemoryLinkStore()
        return
    engine = create_engine_from_settings(sqlite_settings(tmp_path))
    await init_db(engine)
    yield SQLAlchemyLinkStore(create_session_factory(engine))
    await close_db(engine)


@pytest.fixture
def codes() -> SequenceCodeGenerator:
    return SequenceCodeGenerator([])


@pytest_asyncio.fixture
async def client(memory_store: InMemoryLinkStore) -> AsyncGenerator[AsyncClient, None]:
    app.dependency_overrides[get_link_store] = lambda: memory_store

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def seeded_client(
    memory_store: InMemoryLinkStore, codes: SequenceCodeGenerator
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose generated codes come from the ``codes`` fixture."""
    app.dependency_overrides[get_link_store] = lambda: memory_store
    app.dependency_overrides[get_code_generator] = lambda: codes

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
