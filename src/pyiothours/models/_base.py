"""Base model and timestamp helpers shared by the telemetry models.

Every model inherits from :class:`IoTBaseModel`, which is frozen and
ignores unknown keys so that producers can add fields to the document
without breaking older hosts.
"""

from __future__ import annotations

from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


def _parse_text(text: str) -> datetime:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    # RFC 2822 / HTTP-date, e.g. "Thu, 01 Jan 2026 12:00:00 GMT".
    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"unrecognised timestamp {text!r}; expected ISO-8601 or RFC 2822") from exc


def parse_iot_timestamp(value: Any) -> datetime:
    """Parse a timestamp string into a timezone-aware datetime.

    ISO-8601 (with an optional trailing ``Z``) is tried first, then RFC 2822.
    Naive values are interpreted in the host's local time zone. Raises
    :class:`ValueError` for anything unparseable, and for instants too close
    to the edge of the supported range to be shown in local time.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        parsed = _parse_text(value.strip())
    else:
        raise ValueError(f"expected a timestamp string, got {value!r}")
    try:
        if parsed.tzinfo is None:
            # astimezone() on a naive value assumes local time.
            parsed = parsed.astimezone()
        parsed.astimezone()
        parsed.astimezone(UTC)
    except (OverflowError, OSError, ValueError) as exc:
        raise ValueError(f"timestamp {value!r} is out of range") from exc
    return parsed


class IoTBaseModel(BaseModel):
    """Base for pyiothours models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )
