"""
Widgets Router — Pull-based widget data for the host dashboard.

Endpoints:
  GET /widgets/status       — Daily counters + blocking status
  GET /widgets/top-domains  — Top blocked / allowed domains
  GET /widgets/history      — Traffic in 10-minute buckets

Without background refresh every request runs a fresh refresh cycle: new
session, no caching. With it, requests serve the data owned by the app's
WidgetRefresher for that kind (the empty placeholder until its first cycle
succeeds). A top-domains count override always pulls fresh.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from pihole_widgets.config import settings
from pihole_widgets.models.pihole import (
    EndpointConfig,
    StatusSummary,
    TopDomains,
    TrafficHistory,
)
from pihole_widgets.services.pihole.errors import PiholeError
from pihole_widgets.services.pihole.scheduler import WidgetRefresher
from pihole_widgets.services.pihole.widgets import (
    PiholeWidget,
    StatusWidget,
    TopDomainsWidget,
    TrafficHistoryWidget,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_endpoint_config() -> EndpointConfig:
    """Build the appliance config from host settings."""
    return EndpointConfig(
        hostname=settings.pihole_hostname,
        api_key=settings.pihole_api_key or "",
        count=settings.pihole_count,
    )


def _background(request: Request, kind: str) -> WidgetRefresher | None:
    refreshers = getattr(request.app.state, "refreshers", None) or {}
    return refreshers.get(kind)


async def _refresh(widget: PiholeWidget[Any]) -> Any:
    try:
        return await widget.refresh()
    except PiholeError as e:
        raise HTTPException(status_code=502, detail=str(e))


@router.get("/status")
async def status_widget(
    request: Request,
    config: EndpointConfig = Depends(get_endpoint_config),
) -> StatusSummary:
    """Summary counters and blocking status."""
    refresher = _background(request, StatusWidget.kind)
    if refresher is not None:
        return refresher.widget.data
    widget = StatusWidget(config, timeout=settings.pihole_request_timeout)
    return await _refresh(widget)


@router.get("/top-domains")
async def top_domains_widget(
    request: Request,
    config: EndpointConfig = Depends(get_endpoint_config),
    count: int | None = Query(default=None, gt=0),
) -> TopDomains:
    """Top blocked and allowed domains."""
    refresher = _background(request, TopDomainsWidget.kind)
    if refresher is not None and count in (None, refresher.widget.config.count):
        return refresher.widget.data
    if count is not None:
        config = config.model_copy(update={"count": count})
    widget = TopDomainsWidget(config, timeout=settings.pihole_request_timeout)
    return await _refresh(widget)


@router.get("/history")
async def history_widget(
    request: Request,
    config: EndpointConfig = Depends(get_endpoint_config),
) -> TrafficHistory:
    """Reconstructed traffic history."""
    refresher = _background(request, TrafficHistoryWidget.kind)
    if refresher is not None:
        return refresher.widget.data
    widget = TrafficHistoryWidget(config, timeout=settings.pihole_request_timeout)
    return await _refresh(widget)
