"""FastAPI route definitions for the shortlinks service.

API Endpoint Overview
=====================
::
    GET    /healthz
        └─ HealthResponse (200)

    GET    /                      dashboard page
    GET    /code/{code}           stats page

    POST   /api/links
        ├─ LinkCreate (JSON or form body)
        └─ LinkCreated (201) or 400/409/500

    GET    /api/links
        └─ [LinkOut] (200), newest first

    GET    /api/links/{code}
        └─ LinkOut (200) or 404

    DELETE /api/links/{code}
        └─ DeleteResponse (200) or 404

    GET    /{code}
        └─ 302 Redirect, or plain-text 404

Key Behaviours
===============
- The store and code generator are injected through ``get_link_service``.
- Validation errors answer 400, conflicts 409, store failures an opaque 500.
- The redirect answers plain text on failure since its caller is a browser.
- 302 redirects, matching what browsers and link previewers expect.
"""

from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse

from shortlinks.dependencies import (
    RequestContext,
    ServiceManager,
    get_link_create,
    get_link_service,
    get_request_context,
    get_service_manager,
)
from shortlinks.exceptions import CodeConflictError, LinkNotFoundError, LinkValidationError, StoreError
from shortlinks.schemas import DeleteResponse, HealthResponse, LinkCreate, LinkCreated, LinkOut
from shortlinks.service import LinkService

__all__ = ["router", "STATIC_DIR"]

STATIC_DIR = Path(__file__).parent / "static"

router = APIRouter()


@router.get("/healthz", response_model=HealthResponse, tags=["health"])
async def health_check(manager: ServiceManager = Depends(get_service_manager)) -> HealthResponse:
    return HealthResponse(ok=True, version=manager.settings.APP_VERSION)


@router.get("/", include_in_schema=False)
async def dashboard() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


@router.get("/code/{code}", include_in_schema=False)
async def stats_page(code: str) -> FileResponse:
    return FileResponse(STATIC_DIR / "stats.html")


@router.post("/api/links", response_model=LinkCreated, status_code=201, tags=["links"])
async def create_link(
    payload: LinkCreate = Depends(get_link_create),
    ctx: RequestContext = Depends(get_request_context),
    service: LinkService = Depends(get_link_service),
) -> LinkCreated:
    ctx.logger.info(
        f"Link creation requested: {payload.url}",
        extra={"operation": "create_link", "custom_code": payload.custom_code},
    )
    try:
        link = await service.create_link(payload)
    except LinkValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except CodeConflictError as exc:
        raise HTTPException(status_code=409, detail="Code already exists") from exc
    except StoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to create short URL") from exc

    return LinkCreated(short_url=service.short_url_for(link.code), code=link.code, target_url=link.target_url)


@router.get("/api/links", response_model=list[LinkOut], tags=["links"])
async def list_links(service: LinkService = Depends(get_link_service)) -> list[LinkOut]:
    try:
        links = await service.list_links()
    except StoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to fetch URLs") from exc
    return [LinkOut.from_link(link) for link in links]


@router.get("/api/links/{code}", response_model=LinkOut, tags=["links"])
async def get_link(code: str, service: LinkService = Depends(get_link_service)) -> LinkOut:
    try:
        link = await service.get_link(code)
    except LinkNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Link not found") from exc
    except StoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to fetch link stats") from exc
    return LinkOut.from_link(link)


@router.delete("/api/links/{code}", response_model=DeleteResponse, tags=["links"])
async def delete_link(code: str, service: LinkService = Depends(get_link_service)) -> DeleteResponse:
    try:
        await service.delete_link(code)
    except LinkNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Link not found") from exc
    except StoreError as exc:
        raise HTTPException(status_code=500, detail="Failed to delete URL") from exc
    return DeleteResponse(success=True)


@router.get("/{code}", tags=["redirect"])
async def redirect_to_target(
    code: str,
    ctx: RequestContext = Depends(get_request_context),
    service: LinkService = Depends(get_link_service),
):
    try:
        target_url = await service.record_click(code)
    except LinkNotFoundError:
        ctx.logger.warning(
            f"Redirect failed - code not found: {code}",
            extra={"operation": "redirect", "duration_ms": ctx.get_duration()},
        )
        return PlainTextResponse("URL not found", status_code=404)
    except StoreError as exc:
        ctx.logger.error(f"Redirect failed for {code}: {exc}", extra={"operation": "redirect"})
        return PlainTextResponse("Server error", status_code=500)

    ctx.logger.info(
        f"Redirect: {code} -> {target_url}",
        extra={"operation": "redirect", "duration_ms": ctx.get_duration()},
    )
    return RedirectResponse(url=target_url, status_code=302)
