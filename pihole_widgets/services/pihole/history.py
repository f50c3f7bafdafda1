"""
Pi-hole History — Rebuild labelled 10-minute buckets from raw sample arrays.

The appliance sends bare integer arrays with no timestamps. Start time is
guessed from the length: exactly 144 buckets is read as "the last 24 hours",
anything else as "since local midnight today".
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from pihole_widgets.models.pihole import HistoryPoint

BUCKET = timedelta(minutes=10)
FULL_DAY_BUCKETS = 144  # 24h / 10min


def format_label(ts: datetime) -> str:
    """12-hour clock label, e.g. 17:55 -> "5:55 PM", 00:00 -> "12:00 AM"."""
    hour = ts.hour % 12 or 12
    suffix = "AM" if ts.hour < 12 else "PM"
    return f"{hour}:{ts.minute:02d} {suffix}"


def series_start(length: int, now: datetime) -> datetime:
    """Timestamp of the first bucket for a series of the given length."""
    if length == FULL_DAY_BUCKETS:
        return now - timedelta(hours=24)
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def reconstruct(
    total_series: Sequence[int],
    blocked_series: Sequence[int],
    now: datetime | None = None,
) -> list[HistoryPoint]:
    """Pair up both series and attach a timestamp and label to each bucket.

    Both series are truncated to the shorter length. Output order follows
    input order.
    """
    if now is None:
        now = datetime.now()

    length = min(len(total_series), len(blocked_series))
    start = series_start(length, now)

    points: list[HistoryPoint] = []
    for i in range(length):
        ts = start + i * BUCKET
        points.append(
            HistoryPoint(
                label=format_label(ts),
                total=total_series[i],
                blocked=blocked_series[i],
                timestamp=ts,
            )
        )
    return points
