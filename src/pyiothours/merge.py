"""Merge a telemetry document into caller-owned equipment records."""

from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping
from typing import Any

from pyiothours.models.telemetry import TelemetryDocument

_logger = logging.getLogger(__name__)

EQUIPMENT_NUMBER_KEY = "equipmentNumber"
CURRENT_HOURS_KEY = "currentHours"
LAST_UPDATE_KEY = "lastIoTUpdate"


def apply_telemetry(
    document: TelemetryDocument,
    records: Iterable[MutableMapping[str, Any]],
) -> list[str]:
    """Write the document's reading into every matching record, in place.

    A record matches when its equipment number is mapped to a device and
    that device is the one that produced the document. Returns the
    equipment numbers that were updated, in record order.
    """
    if document.equipment_mapping is None:
        return []

    updated: list[str] = []
    for record in records:
        equipment_number = record.get(EQUIPMENT_NUMBER_KEY)
        if not isinstance(equipment_number, str):
            continue
        device_id = document.device_for(equipment_number)
        if not device_id or device_id != document.device_id:
            continue

        record[CURRENT_HOURS_KEY] = document.current_hours
        record[LAST_UPDATE_KEY] = document.last_updated
        updated.append(equipment_number)
        _logger.info("Updated equipment %s with %s hours", equipment_number, document.current_hours)

    return updated
