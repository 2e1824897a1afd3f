"""Data models for the telemetry document and derived status."""

from pyiothours.models._base import IoTBaseModel, parse_iot_timestamp
from pyiothours.models.result import FetchFailure, FetchResult
from pyiothours.models.status import NEVER, IoTStatus, StatusReport
from pyiothours.models.telemetry import TelemetryDocument

__all__ = [
    "FetchFailure",
    "FetchResult",
    "IoTBaseModel",
    "IoTStatus",
    "NEVER",
    "StatusReport",
    "TelemetryDocument",
    "parse_iot_timestamp",
]
