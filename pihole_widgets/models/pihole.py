"""
Pi-hole Models — Pydantic models for appliance config, sessions, and widget data.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, NonNegativeInt

# =============================================================================
# CONFIG / SESSION
# =============================================================================


class EndpointConfig(BaseModel):
    """Connection settings for one appliance, as handed over by the host."""

    hostname: str = Field(..., min_length=1)
    api_key: str = Field("", alias="apiKey")
    count: int = Field(10, gt=0)

    class Config:
        populate_by_name = True

    @property
    def base_address(self) -> str:
        """Hostname without trailing separators, with a scheme."""
        base = self.hostname.strip().rstrip("/")
        if not (base.startswith("http://") or base.startswith("https://")):
            base = "http://" + base
        return base


class Session(BaseModel):
    """Short-lived appliance session. Created per refresh cycle, never stored."""

    token: str | None = None

    @property
    def authenticated(self) -> bool:
        return self.token is not None


# =============================================================================
# STATS
# =============================================================================


class SummaryStats(BaseModel):
    """Validated /api/stats/summary payload (appliance field names)."""

    domains_being_blocked: NonNegativeInt
    dns_queries_today: NonNegativeInt
    ads_blocked_today: NonNegativeInt
    ads_percentage_today: float | str


class StatusSummary(BaseModel):
    """Status/summary widget output. All fields None is the empty placeholder."""

    domains_being_blocked: int | None = None
    dns_queries_today: int | None = None
    ads_blocked_today: int | None = None
    ads_percentage_today: float | str | None = None  # one decimal when numeric
    blocking: bool | None = None
    status: Literal["enabled", "disabled"] | None = None

    @property
    def is_empty(self) -> bool:
        return self.status is None


class TopDomains(BaseModel):
    """Top-domains widget output: domain -> query count per category."""

    blocked: dict[str, NonNegativeInt] = Field(default_factory=dict)
    allowed: dict[str, NonNegativeInt] = Field(default_factory=dict)


# =============================================================================
# HISTORY
# =============================================================================


class HistoryPoint(BaseModel):
    """One 10-minute bucket of the traffic chart."""

    label: str  # e.g. "5:55 PM"
    total: NonNegativeInt
    blocked: NonNegativeInt
    timestamp: datetime


class TrafficHistory(BaseModel):
    """Traffic-history widget output, chronological."""

    points: list[HistoryPoint] = Field(default_factory=list)
