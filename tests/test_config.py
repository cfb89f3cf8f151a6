"""Settings and application wiring tests."""

import pytest
from pydantic import ValidationError

from shortlinks.config import Settings
from shortlinks.database import create_engine_from_settings
from shortlinks.main import create_app
from shortlinks.store import SQLAlchemyLinkStore


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


@pytest.mark.parametrize(
    "url",
    ["postgres://user:pw@db.example.com:5432/links", "postgresql://user:pw@db.example.com:5432/links"],
)
def test_database_url_uses_asyncpg(url) -> None:
    settings = make_settings(DATABASE_URL=url)

    assert settings.DATABASE_URL == "postgresql+asyncpg://user:pw@db.example.com:5432/links"


def test_database_url_left_alone_for_other_drivers() -> None:
    settings = make_settings(DATABASE_URL="sqlite+aiosqlite:///links.db")

    assert settings.DATABASE_URL == "sqlite+aiosqlite:///links.db"


def test_base_url_trailing_slash_stripped() -> None:
    assert make_settings(BASE_URL="https://sho.rt/").BASE_URL == "https://sho.rt"


@pytest.mark.parametrize("env,expected", [("production", True), ("PRODUCTION", True), ("development", False)])
def test_is_production(env, expected) -> None:
    assert make_settings(APP_ENV=env).is_production is expected


def test_postgres_engine_is_pooled() -> None:
    engine = create_engine_from_settings(make_settings(DB_POOL_SIZE=7))
    try:
        assert engine.url.drivername == "postgresql+asyncpg"
        assert engine.pool.size() == 7
    finally:
        engine.sync_engine.dispose()


@pytest.mark.asyncio
async def test_lifespan_builds_sql_store(tmp_path) -> None:
    settings = make_settings(DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    app = create_app(settings=settings)

    async with app.router.lifespan_context(app):
        store = app.state.services.store
        assert isinstance(store, SQLAlchemyLinkStore)
        await store.ping()
        assert await store.list_all() == []

    assert app.state.services.store is None


@pytest.mark.parametrize("length", [0, 11])
def test_short_code_length_must_fit_column(length) -> None:
    with pytest.raises(ValidationError):
        make_settings(SHORT_CODE_LENGTH=length)


@pytest.mark.parametrize("length", [1, 10])
def test_short_code_length_bounds_accepted(length) -> None:
    assert make_settings(SHORT_CODE_LENGTH=length).SHORT_CODE_LENGTH == length
