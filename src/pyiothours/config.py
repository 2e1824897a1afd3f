"""Client configuration for pyiothours."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyiothours.exceptions import IoTConfigError
from pyiothours.freshness import DEFAULT_TIMESTAMP_FORMAT

#: Default document location, relative to the host's working directory.
DEFAULT_SOURCE = "iot_data.json"

#: Default poll interval in seconds (30000 ms).
DEFAULT_POLL_INTERVAL: float = 30.0


def _env_float(value: str | None, name: str) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise IoTConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class IoTConfig:
    """Client configuration.

    Parameters
    ----------
    source : str
        Location of the telemetry JSON document. ``http://`` and
        ``https://`` URLs are fetched over the network; ``file://`` URLs
        and plain paths are read from disk.
    poll_interval : float
        Seconds between polling callback invocations.
    request_timeout : float or None
        Total timeout in seconds for one HTTP retrieval. ``None`` leaves
        the aiohttp default in place.
    timestamp_format : str
        ``strftime`` pattern used for the localized ``lastUpdate`` value
        of status reports.
    """

    source: str = DEFAULT_SOURCE
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float | None = None
    timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT

    def __post_init__(self) -> None:
        if not self.source or not self.source.strip():
            raise IoTConfigError("source must be a non-empty path or URL")
        if self.poll_interval <= 0:
            raise IoTConfigError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise IoTConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    @classmethod
    def from_env(cls, **overrides: Any) -> IoTConfig:
        """Create configuration from environment variables.

        Reads ``IOT_DATA_SOURCE``, ``IOT_POLL_INTERVAL`` and
        ``IOT_REQUEST_TIMEOUT``. Explicit keyword arguments override
        environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        IoTConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        source = env.get("IOT_DATA_SOURCE")
        if source is not None:
            config_kwargs["source"] = source

        interval = _env_float(env.get("IOT_POLL_INTERVAL"), "IOT_POLL_INTERVAL")
        if interval is not None:
            config_kwargs["poll_interval"] = interval

        timeout = _env_float(env.get("IOT_REQUEST_TIMEOUT"), "IOT_REQUEST_TIMEOUT")
        if timeout is not None:
            config_kwargs["request_timeout"] = timeout

        config_kwargs.update(overrides)
        return cls(**config_kwargs)
