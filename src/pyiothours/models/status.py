"""Freshness status report model."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import ConfigDict, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

from pyiothours.models._base import IoTBaseModel

#: ``last_update`` value used when no document could be fetched.
NEVER = "Never"


class IoTStatus(StrEnum):
    """Coarse freshness of the telemetry source."""

    ONLINE = "online"
    STALE = "stale"
    OFFLINE = "offline"


class StatusReport(IoTBaseModel):
    """Status value handed to the host for display.

    Attributes are snake_case; :meth:`to_dict` renders the camelCase shape
    (``lastUpdate``, ``deviceId``, ``currentHours``) that UI layers consume.
    """

    model_config = ConfigDict(alias_generator=to_camel)

    status: IoTStatus
    message: str
    last_update: str = NEVER
    device_id: str | None = None
    current_hours: StrictInt | StrictFloat | None = None

    @property
    def has_data(self) -> bool:
        return self.device_id is not None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
