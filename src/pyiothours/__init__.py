"""pyiothours - Async Python client for equipment-hours IoT telemetry."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyiothours")
except PackageNotFoundError:
    __version__ = "0+local"
from pyiothours.client import IoTDataClient
from pyiothours.config import IoTConfig
from pyiothours.exceptions import IoTConfigError, IoTError, IoTPayloadError, IoTTransportError
from pyiothours.freshness import classify_freshness
from pyiothours.merge import apply_telemetry
from pyiothours.models import (
    FetchFailure,
    FetchResult,
    IoTStatus,
    StatusReport,
    TelemetryDocument,
)
from pyiothours.poller import Poller

__all__ = [
    "__version__",
    "FetchFailure",
    "FetchResult",
    "IoTConfig",
    "IoTConfigError",
    "IoTDataClient",
    "IoTError",
    "IoTPayloadError",
    "IoTStatus",
    "IoTTransportError",
    "Poller",
    "StatusReport",
    "TelemetryDocument",
    "apply_telemetry",
    "classify_freshness",
]
