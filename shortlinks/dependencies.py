"""Dependency injection for the shortlinks routes.

Shared resources (settings, logger, link store, code generator) live on a
``ServiceManager`` attached to ``app.state`` by ``create_app``. Nothing here is
process-global, so tests override ``get_link_store`` / ``get_code_generator``
through ``app.dependency_overrides`` and get a fully isolated service.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from shortlinks.codes import CodeGenerator, NanoidCodeGenerator
from shortlinks.config import Settings
from shortlinks.schemas import LinkCreate
from shortlinks.service import LinkService
from shortlinks.store import LinkStore

__all__ = [
    "ServiceManager",
    "RequestContext",
    "configure_logging",
    "get_service_manager",
    "get_link_store",
    "get_code_generator",
    "get_request_context",
    "get_link_service",
    "get_link_create",
]

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Settings) -> logging.Logger:
    """Setup the ``shortlinks`` logger once."""
    logger = logging.getLogger("shortlinks")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    return logger


# ============================================================================
# SERVICE MANAGER
# ============================================================================


class ServiceManager:
    """Holder for resources shared by all requests of one application.

    The store is attached during startup (or injected up front, e.g. an
    in-memory store), and released on shutdown.
    """

    def __init__(
        self,
        settings: Settings,
        store: Optional[LinkStore] = None,
        generator: Optional[CodeGenerator] = None,
    ) -> None:
        self.settings = settings
        self.logger = configure_logging(settings)
        self.store = store
        self.generator = generator or NanoidCodeGenerator()

    async def cleanup(self) -> None:
        if self.store is not None:
            await self.store.close()


# ============================================================================
# LIGHTWEIGHT REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request view of the shared resources plus tracking information.

    Attributes:
        services: Application-wide service manager
        store: Link store used for this request
        generator: Code generator used for this request
        request_id: Unique identifier for this request
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
    """

    services: ServiceManager
    store: LinkStore
    generator: CodeGenerator
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())

    @property
    def settings(self) -> Settings:
        return self.services.settings

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Shared logger carrying this request's context as ``extra``."""
        return logging.LoggerAdapter(
            self.services.logger,
            {
                "request_id": self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
            },
        )

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_service_manager(request: Request) -> ServiceManager:
    return request.app.state.services


def get_link_store(manager: ServiceManager = Depends(get_service_manager)) -> LinkStore:
    if manager.store is None:
        raise RuntimeError("Link store is not initialised; was the application lifespan run?")
    return manager.store


def get_code_generator(manager: ServiceManager = Depends(get_service_manager)) -> CodeGenerator:
    return manager.generator


def get_request_context(
    request: Request,
    manager: ServiceManager = Depends(get_service_manager),
    store: LinkStore = Depends(get_link_store),
    generator: CodeGenerator = Depends(get_code_generator),
) -> RequestContext:
    client_ip = request.client.host if request.client else None
    return RequestContext(
        services=manager,
        store=store,
        generator=generator,
        request_id=request.headers.get("x-request-id") or str(uuid.uuid4()),
        user_agent=request.headers.get("user-agent"),
        client_ip=client_ip,
    )


def get_link_service(ctx: RequestContext = Depends(get_request_context)) -> LinkService:
    return LinkService.from_context(ctx)


async def get_link_create(request: Request) -> LinkCreate:
    """Read a ``LinkCreate`` from either a form post or a JSON body.

    Anything that is not a form is parsed as JSON. Unusable bodies raise
    ``RequestValidationError`` so they get the same 400 as schema errors.
    """
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data = dict(form)
    else:
        try:
            data = await request.json()
        except ValueError as exc:
            raise RequestValidationError(
                [{"type": "json_invalid", "loc": ("body",), "msg": "JSON decode error", "input": {}}]
            ) from exc

    try:
        return LinkCreate.model_validate(data)
    except ValidationError as exc:
        raise RequestValidationError(
            [{**error, "loc": ("body", *error["loc"])} for error in exc.errors(include_url=False)]
        ) from exc
