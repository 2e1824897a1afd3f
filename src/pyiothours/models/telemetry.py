"""Telemetry document model."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, StrictFloat, StrictInt, field_validator, model_validator

from pyiothours.models._base import IoTBaseModel, parse_iot_timestamp


class TelemetryDocument(IoTBaseModel):
    """One fetched equipment-hours document.

    Parameters
    ----------
    device_id : str
        Identifier of the device that produced the reading.
    equipment_mapping : dict or None
        Equipment number -> device identifier. ``None`` when the document
        carries no mapping, in which case nothing can be merged.
    current_hours : int or float
        Hour-meter reading.
    last_updated : str
        Timestamp of the reading, kept verbatim as received.
    raw : dict
        Original decoded document.
    """

    device_id: str
    equipment_mapping: dict[str, str | None] | None = None
    current_hours: StrictInt | StrictFloat
    last_updated: str
    raw: dict[str, Any] = Field(default_factory=dict, repr=False)

    @model_validator(mode="before")
    @classmethod
    def _stash_raw(cls, values: Any) -> Any:
        # A producer-sent "raw" key is kept inside the stash, not used as the stash.
        if isinstance(values, dict):
            return {**values, "raw": dict(values)}
        return values

    @field_validator("last_updated")
    @classmethod
    def _check_timestamp(cls, value: str) -> str:
        parse_iot_timestamp(value)
        return value

    @property
    def last_updated_at(self) -> datetime:
        """``last_updated`` as a timezone-aware datetime."""
        return parse_iot_timestamp(self.last_updated)

    def device_for(self, equipment_number: str) -> str | None:
        """Return the device mapped to *equipment_number*, if any."""
        if self.equipment_mapping is None:
            return None
        return self.equipment_mapping.get(equipment_number)
