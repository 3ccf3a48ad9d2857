# utils/time_helpers.py
# UTC-Zeit für Snapshot (ms), Memo (s) und Log-Zeilen (ISO)
#
# Snapshot timestamps are epoch milliseconds, upstream
# transaction timestamps are epoch seconds.

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_now_ts() -> int:
    return int(utc_now().timestamp())


def utc_now_ts_ms() -> int:
    return int(utc_now().timestamp() * 1000)


def utc_now_iso() -> str:
    # 2025-01-01T12:00:00.000Z (same shape as the frontend expects)
    return utc_now().isoformat(timespec="milliseconds").replace("+00:00", "Z")


def age_seconds(ts_ms: int, now_ms: int | None = None) -> int:
    if now_ms is None:
        now_ms = utc_now_ts_ms()
    return round((now_ms - ts_ms) / 1000)
