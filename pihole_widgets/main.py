"""
Pi-hole Widgets — Dashboard data API

FastAPI host for the Pi-hole statistics widgets. Serves widget data as
JSON; rendering and charting happen in the dashboard frontend.

With WIDGET_REFRESH_SECONDS > 0 the widgets are refreshed in the background
and the routes serve the last result. Otherwise every request pulls fresh.
"""

import asyncio
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pihole_widgets.config import settings
from pihole_widgets.routers import widgets
from pihole_widgets.services.pihole.scheduler import WidgetRefresher
from pihole_widgets.services.pihole.widgets import (
    StatusWidget,
    TopDomainsWidget,
    TrafficHistoryWidget,
)

# =============================================================================
# LOGGING
# =============================================================================

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)

WIDGET_KINDS = (StatusWidget.kind, TopDomainsWidget.kind, TrafficHistoryWidget.kind)


# =============================================================================
# LIFESPAN
# =============================================================================


def build_refreshers() -> dict[str, WidgetRefresher]:
    """One refresher per widget kind, fed by the settings-derived config."""
    config = widgets.get_endpoint_config()
    timeout = settings.pihole_request_timeout
    refreshers = [
        WidgetRefresher(StatusWidget(config, timeout=timeout)),
        WidgetRefresher(TopDomainsWidget(config, timeout=timeout)),
        WidgetRefresher(TrafficHistoryWidget(config, timeout=timeout)),
    ]
    return {r.widget.kind: r for r in refreshers}


@asynccontextmanager
async def lifespan(app: FastAPI):  # type: ignore[no-untyped-def]
    """Start background refresh loops when enabled; routes read their data."""
    logger.info("Starting %s in %s mode", settings.app_name, settings.environment)
    logger.info("Appliance: %s", settings.pihole_hostname)

    stop = asyncio.Event()
    tasks: list[asyncio.Task[None]] = []
    app.state.refreshers = {}

    if settings.widget_refresh_seconds > 0:
        app.state.refreshers = build_refreshers()
        for refresher in app.state.refreshers.values():
            tasks.append(
                asyncio.create_task(
                    refresher.run_periodic(settings.widget_refresh_seconds, stop)
                )
            )

    yield

    stop.set()
    if tasks:
        await asyncio.gather(*tasks)
    app.state.refreshers = {}
    logger.info("Shutting down %s", settings.app_name)


# =============================================================================
# APP
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description="Pi-hole statistics for dashboard widgets",
    version="0.1.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Debug-log each widget request with its status."""
    response = await call_next(request)
    logger.debug("%s %s -> %d", request.method, request.url.path, response.status_code)
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything that is not an appliance error is a bug on our side."""
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# =============================================================================
# ROUTERS
# =============================================================================

app.include_router(widgets.router, prefix="/widgets", tags=["Widgets"])


# =============================================================================
# ROOT / HEALTH
# =============================================================================


@app.get("/")
async def root() -> dict[str, Any]:
    """Configured appliance and the widgets served for it."""
    return {
        "service": settings.app_name,
        "appliance": widgets.get_endpoint_config().base_address,
        "widgets": [f"/widgets/{kind}" for kind in WIDGET_KINDS],
        "background_refresh": settings.widget_refresh_seconds > 0,
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check."""
    return {"status": "healthy", "service": settings.app_name}
