"""
Pi-hole Stat Fetcher — Authenticated GETs against the statistics endpoints.

fetch_json() is stateless and knows nothing about datasets. The fetch_*
helpers below add the per-dataset validation rules:

  summary      strict: four numeric fields must be defined (zero is valid)
  blocking     lenient: missing "blocking" means enabled
  top domains  lenient: anything but a JSON object becomes an empty mapping
  history      strict: both series must be present

Counts and samples that are present must be non-negative integers; bad
values raise ValidationError in every dataset, lenient ones included.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import NonNegativeInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from pihole_widgets.models.pihole import Session, SummaryStats
from pihole_widgets.services.pihole.errors import FetchError, ValidationError

logger = logging.getLogger(__name__)

SUMMARY_PATH = "/api/stats/summary"
BLOCKING_PATH = "/api/dns/blocking"
TOP_DOMAINS_PATH = "/api/stats/top_domains"
HISTORY_PATH = "/api/history"

SUMMARY_FIELDS = (
    "domains_being_blocked",
    "dns_queries_today",
    "ads_blocked_today",
    "ads_percentage_today",
)
TOTAL_SERIES_FIELD = "domains_over_time"
BLOCKED_SERIES_FIELD = "ads_over_time"

_RANKING = TypeAdapter(dict[str, NonNegativeInt])
_SERIES = TypeAdapter(list[NonNegativeInt])


def _headers(session: Session | None) -> dict[str, str]:
    headers = {"Accept": "application/json"}
    if session is not None and session.token:
        headers["sid"] = session.token
    return headers


async def fetch_json(
    http: httpx.AsyncClient,
    base_address: str,
    path: str,
    session: Session | None = None,
    params: dict[str, Any] | None = None,
) -> Any:
    """GET {base_address}{path} and return the decoded JSON body.

    Any non-2xx status or transport failure raises FetchError immediately.
    """
    try:
        resp = await http.get(
            f"{base_address}{path}",
            params=params,
            headers=_headers(session),
        )
    except httpx.HTTPError as e:
        logger.warning("Pi-hole fetch %s: transport error: %s", path, e.__class__.__name__)
        raise FetchError("request failed", path) from e

    if not resp.is_success:
        logger.warning("Pi-hole fetch %s: HTTP %d", path, resp.status_code)
        raise FetchError("request failed", path)

    try:
        return resp.json()
    except ValueError as e:
        raise FetchError("invalid JSON", path) from e


# =============================================================================
# DATASETS
# =============================================================================


async def fetch_summary(
    http: httpx.AsyncClient, base_address: str, session: Session | None
) -> SummaryStats:
    """Fetch and validate the daily summary counters."""
    payload = await fetch_json(http, base_address, SUMMARY_PATH, session)
    if not isinstance(payload, dict):
        raise ValidationError("summary is not an object", SUMMARY_PATH)

    missing = [f for f in SUMMARY_FIELDS if payload.get(f) is None]
    if missing:
        raise ValidationError(f"summary missing {', '.join(missing)}", SUMMARY_PATH)

    try:
        return SummaryStats(**{f: payload[f] for f in SUMMARY_FIELDS})
    except PydanticValidationError as e:
        raise ValidationError("summary has invalid values", SUMMARY_PATH) from e


def _blocking_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        # Newer appliances report "enabled" / "disabled"
        return value.strip().lower() != "disabled"
    return bool(value)


async def fetch_blocking_status(
    http: httpx.AsyncClient, base_address: str, session: Session | None
) -> bool:
    """Fetch the blocking switch. Missing field counts as enabled."""
    payload = await fetch_json(http, base_address, BLOCKING_PATH, session)
    value = payload.get("blocking") if isinstance(payload, dict) else None
    if value is None:
        return True
    return _blocking_flag(value)


async def fetch_top_domains(
    http: httpx.AsyncClient,
    base_address: str,
    session: Session | None,
    *,
    blocked: bool,
    count: int,
) -> dict[str, int]:
    """Fetch one top-domains ranking (blocked or allowed)."""
    payload = await fetch_json(
        http,
        base_address,
        TOP_DOMAINS_PATH,
        session,
        params={"blocked": "true" if blocked else "false", "count": count},
    )
    if not isinstance(payload, dict):
        logger.debug(
            "Pi-hole top domains (blocked=%s): unexpected %s payload, using empty mapping",
            blocked,
            type(payload).__name__,
        )
        return {}
    try:
        return _RANKING.validate_python({str(d): hits for d, hits in payload.items()})
    except PydanticValidationError as e:
        raise ValidationError("top domains has invalid counts", TOP_DOMAINS_PATH) from e


async def fetch_history(
    http: httpx.AsyncClient, base_address: str, session: Session | None
) -> tuple[list[int], list[int]]:
    """Fetch the raw (total, blocked) sample series."""
    payload = await fetch_json(http, base_address, HISTORY_PATH, session)
    if not isinstance(payload, dict):
        raise ValidationError("history is not an object", HISTORY_PATH)

    total = payload.get(TOTAL_SERIES_FIELD)
    blocked = payload.get(BLOCKED_SERIES_FIELD)
    if not isinstance(total, list) or not isinstance(blocked, list):
        raise ValidationError("history missing time series", HISTORY_PATH)

    try:
        return _SERIES.validate_python(total), _SERIES.validate_python(blocked)
    except PydanticValidationError as e:
        raise ValidationError("history has invalid samples", HISTORY_PATH) from e
