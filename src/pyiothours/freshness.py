"""Freshness classification of a telemetry timestamp.

Pure functions only; the client supplies the document timestamp and the
current time. Thresholds are evaluated as a cascade so a reading older
than a day is reported ``offline`` even though it is also past the stale
threshold.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import NamedTuple

from pyiothours.models.status import IoTStatus

#: Readings older than this many minutes are stale.
STALE_AFTER_MINUTES = 60

#: Readings older than this many minutes (24 h) are treated as offline.
OFFLINE_AFTER_MINUTES = 24 * 60

UNAVAILABLE_MESSAGE = "IoT data unavailable"
VERY_OLD_MESSAGE = "IoT data very old (>24h)"

#: ``strftime`` pattern for the host-facing timestamp; locale-dependent.
DEFAULT_TIMESTAMP_FORMAT = "%x %X"


class Freshness(NamedTuple):
    status: IoTStatus
    message: str
    elapsed_minutes: int


def elapsed_minutes(last_updated: datetime, now: datetime) -> int:
    """Whole minutes from *last_updated* to *now*, floored.

    A timestamp in the future yields a negative value.
    """
    return (now - last_updated) // timedelta(minutes=1)


def classify_freshness(last_updated: datetime, now: datetime) -> Freshness:
    """Classify a reading taken at *last_updated* as seen at *now*."""
    minutes = elapsed_minutes(last_updated, now)

    status = IoTStatus.ONLINE
    message = f"IoT data current ({minutes} min ago)"

    if minutes > STALE_AFTER_MINUTES:
        status = IoTStatus.STALE
        message = f"IoT data stale ({minutes // 60}h {minutes % 60}m ago)"

    if minutes > OFFLINE_AFTER_MINUTES:
        status = IoTStatus.OFFLINE
        message = VERY_OLD_MESSAGE

    return Freshness(status, message, minutes)


def format_local_timestamp(value: datetime, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """Render *value* in the host's local time zone."""
    return value.astimezone().strftime(fmt)
