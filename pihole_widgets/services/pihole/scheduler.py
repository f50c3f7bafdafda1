"""
Widget Refresher — Serializes refresh cycles per widget and feeds a renderer.

Widgets do not guard against overlapping refreshes. This collaborator does:
a trigger that arrives while a cycle is in flight is dropped, not queued.
The renderer is an injected handle; the widgets never touch it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

from pihole_widgets.services.pihole.widgets import PiholeWidget

logger = logging.getLogger(__name__)


class WidgetRenderer(Protocol):
    """Display-side consumer of finished widget data."""

    def render(self, data: Any) -> None: ...

    def on_error(self, exc: Exception) -> None: ...


class NullRenderer:
    """Default renderer: discards data, ignores failures."""

    def render(self, data: Any) -> None:
        return None

    def on_error(self, exc: Exception) -> None:
        return None


class WidgetRefresher:
    """Drives one widget's refresh cycles, one at a time."""

    def __init__(
        self,
        widget: PiholeWidget[Any],
        renderer: WidgetRenderer | None = None,
    ) -> None:
        self.widget = widget
        self.renderer: WidgetRenderer = renderer or NullRenderer()
        self._in_flight = False

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def trigger(self) -> bool:
        """Run one cycle. Returns True on success, False if skipped or failed."""
        if self._in_flight:
            logger.debug("Pi-hole %s refresh already running, skipping", self.widget.kind)
            return False

        self._in_flight = True
        try:
            data = await self.widget.refresh()
        except Exception as e:
            # Already logged by the widget; the placeholder is rendered instead.
            self.renderer.render(self.widget.data)
            self.renderer.on_error(e)
            return False
        finally:
            self._in_flight = False

        self.renderer.render(data)
        return True

    async def run_periodic(self, interval: float, stop: asyncio.Event) -> None:
        """Trigger every `interval` seconds until `stop` is set."""
        logger.info("Pi-hole %s refresh loop started (every %.0fs)", self.widget.kind, interval)
        while not stop.is_set():
            await self.trigger()
            try:
                await asyncio.wait_for(stop.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.info("Pi-hole %s refresh loop stopped", self.widget.kind)
