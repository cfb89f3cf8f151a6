"""FastAPI application entry point for the shortlinks service.

Application Lifecycle Diagram
=============================
::
    ┌─────────────┐
    │ create_app()│
    │ settings,   │
    │ logging     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ metrics,    │
    │ static,     │
    │ routes      │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ engine +    │
    │ init_db()   │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ close_db()  │
    └─────────────┘

How to Use
===========
**Development**::
    python -m shortlinks            # binds HOST:PORT with uvicorn

**Serverless / production host**::
    APP_ENV=production              # host imports shortlinks.main:app

**Tests**::
    app = create_app(store=InMemoryLinkStore())

Key Behaviours
===============
- When no store is injected, startup builds the asyncpg engine, creates the
  ``urls`` table if missing and attaches a ``SQLAlchemyLinkStore``.
- An injected store (in-memory fake) skips all database work.
- Request bodies that fail to parse are answered with 400, like other
  invalid input to ``POST /api/links``.
- Prometheus metrics are exposed on ``/metrics``.
"""

__all__ = ["app", "create_app", "run"]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from prometheus_fastapi_instrumentator import Instrumentator

from shortlinks.codes import CodeGenerator
from shortlinks.config import Settings, get_settings
from shortlinks.database import close_db, create_engine_from_settings, create_session_factory, init_db
from shortlinks.dependencies import ServiceManager
from shortlinks.routes import STATIC_DIR, router
from shortlinks.store import LinkStore, SQLAlchemyLinkStore

logger = logging.getLogger("shortlinks")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    services: ServiceManager = app.state.services
    engine = None
    # Startup
    if services.store is None:
        engine = create_engine_from_settings(services.settings)
        await init_db(engine)
        services.store = SQLAlchemyLinkStore(create_session_factory(engine))
        logger.info("Database initialised")
    yield
    # Shutdown
    await services.cleanup()
    if engine is not None:
        services.store = None
        await close_db(engine)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[LinkStore] = None,
    generator: Optional[CodeGenerator] = None,
) -> FastAPI:
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Short links with click counting",
        lifespan=lifespan,
    )
    app.state.services = ServiceManager(settings, store=store, generator=generator)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(app).expose(app, include_in_schema=False)

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    if settings.is_production:
        logger.info("Production mode: serving is delegated to the hosting platform (shortlinks.main:app)")
        return
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
