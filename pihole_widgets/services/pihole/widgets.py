"""
Pi-hole Widgets — Per-widget refresh cycles.

Each widget owns its data. A refresh cycle authenticates, fetches what the
widget needs with that one session, and replaces the data wholesale. On any
failure the data is reset to its empty form before the error is re-raised,
so a renderer sees either a complete result or the empty placeholder.

Overlapping refreshes on one instance are the caller's problem; see
scheduler.WidgetRefresher.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Generic, TypeVar

import httpx

from pihole_widgets.models.pihole import (
    EndpointConfig,
    StatusSummary,
    TopDomains,
    TrafficHistory,
)
from pihole_widgets.services.pihole.auth import authenticate
from pihole_widgets.services.pihole.client import (
    fetch_blocking_status,
    fetch_history,
    fetch_summary,
    fetch_top_domains,
)
from pihole_widgets.services.pihole.history import reconstruct

logger = logging.getLogger(__name__)

DataT = TypeVar("DataT")

DEFAULT_TIMEOUT = 10.0


def format_percentage(value: Any) -> Any:
    """Round numeric percentages to one decimal; leave anything else alone."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return round(float(value), 1)
    return value


class PiholeWidget(ABC, Generic[DataT]):
    """Shared refresh-cycle skeleton."""

    kind = "widget"

    def __init__(
        self,
        config: EndpointConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self._timeout = timeout
        self._transport = transport
        self.data: DataT = self.empty()

    @abstractmethod
    def empty(self) -> DataT:
        """Placeholder shown before the first cycle and after a failure."""

    @abstractmethod
    async def _collect(self, http: httpx.AsyncClient) -> DataT:
        """Authenticate and fetch everything this widget needs."""

    async def refresh(self) -> DataT:
        """Run one full refresh cycle and return the new data."""
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as http:
                data = await self._collect(http)
        except Exception:
            self.data = self.empty()
            logger.exception(
                "Pi-hole %s refresh failed (%s)", self.kind, self.config.base_address
            )
            raise

        self.data = data
        logger.debug("Pi-hole %s refreshed (%s)", self.kind, self.config.base_address)
        return data


class StatusWidget(PiholeWidget[StatusSummary]):
    """Daily counters plus the blocking switch."""

    kind = "status"

    def empty(self) -> StatusSummary:
        return StatusSummary()

    async def _collect(self, http: httpx.AsyncClient) -> StatusSummary:
        base = self.config.base_address
        session = await authenticate(http, base, self.config.api_key)
        summary = await fetch_summary(http, base, session)
        blocking = await fetch_blocking_status(http, base, session)

        return StatusSummary(
            domains_being_blocked=summary.domains_being_blocked,
            dns_queries_today=summary.dns_queries_today,
            ads_blocked_today=summary.ads_blocked_today,
            ads_percentage_today=format_percentage(summary.ads_percentage_today),
            blocking=blocking,
            status="enabled" if blocking else "disabled",
        )


class TopDomainsWidget(PiholeWidget[TopDomains]):
    """Most queried blocked and allowed domains."""

    kind = "top-domains"

    def empty(self) -> TopDomains:
        return TopDomains()

    async def _collect(self, http: httpx.AsyncClient) -> TopDomains:
        base = self.config.base_address
        count = self.config.count
        session = await authenticate(http, base, self.config.api_key)

        # Both rankings share the read-only session; order does not matter.
        blocked, allowed = await asyncio.gather(
            fetch_top_domains(http, base, session, blocked=True, count=count),
            fetch_top_domains(http, base, session, blocked=False, count=count),
        )
        return TopDomains(blocked=blocked, allowed=allowed)


class TrafficHistoryWidget(PiholeWidget[TrafficHistory]):
    """Total vs. blocked queries in 10-minute buckets."""

    kind = "history"

    def __init__(
        self,
        config: EndpointConfig,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(config, timeout=timeout, transport=transport)
        self._clock = clock

    def empty(self) -> TrafficHistory:
        return TrafficHistory()

    async def _collect(self, http: httpx.AsyncClient) -> TrafficHistory:
        base = self.config.base_address
        session = await authenticate(http, base, self.config.api_key)
        total, blocked = await fetch_history(http, base, session)
        return TrafficHistory(points=reconstruct(total, blocked, self._clock()))
