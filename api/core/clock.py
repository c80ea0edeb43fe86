"""
Timestamp helpers.

Stored timestamps are ISO-8601 UTC strings with millisecond precision and a
trailing `Z`, e.g. `2024-05-01T12:00:00.000Z`.
"""

from __future__ import annotations

from datetime import datetime, timezone


def _to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_iso() -> str:
    return _to_iso(utc_now())


def epoch_ms_to_iso(epoch_ms: float) -> str:
    return _to_iso(datetime.fromtimestamp(float(epoch_ms) / 1000.0, tz=timezone.utc))
