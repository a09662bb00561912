"""Sitefront FastAPI application."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse

from sitefront.api.admin import router as admin_router
from sitefront.api.health import router as health_router
from sitefront.api.publish import router as publish_router
from sitefront.api.site_pages import NO_STORE, router as site_pages_router
from sitefront.config import settings
from sitefront.engine.templating import render_template
from sitefront.errors import ConflictError, NotFoundError, StoreError
from sitefront.routing.host_router import HostRoutingMiddleware

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Sitefront - Affiliate Microsite Platform",
    description="Serves many branded review microsites from one deployment, routed by hostname",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
# added last so it runs first and sees the original Host header
app.add_middleware(
    HostRoutingMiddleware,
    admin_domains=settings.admin_domains,
    strip_www=settings.strip_www,
)

app.include_router(health_router, tags=["Health"])
app.include_router(admin_router, prefix="/api/admin", tags=["Admin"])
app.include_router(publish_router, prefix="/api/posts", tags=["Publishing"])
app.include_router(site_pages_router, tags=["Sites"])


def _not_found_page() -> HTMLResponse:
    return HTMLResponse(render_template("pages/not_found.html"), status_code=404, headers=NO_STORE)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    logger.info("Not found: %s %s (%s)", request.method, request.url.path, exc)
    return _not_found_page()


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store failure on %s: %s", request.url.path, exc)
    return _not_found_page()


@app.exception_handler(ConflictError)
async def conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.get("/")
async def root():
    """Root endpoint."""
    return {"service": "Sitefront", "version": "0.1.0", "docs": "/docs"}
