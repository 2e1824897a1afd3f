"""Custom exception hierarchy for pyiothours."""

from __future__ import annotations


class IoTError(Exception):
    """Base exception for all pyiothours errors."""


class IoTConfigError(IoTError):
    """Invalid or missing configuration."""


class IoTTransportError(IoTError):
    """Retrieval failure (network error, non-2xx status, unreadable file)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        source: str = "",
    ) -> None:
        self.status_code = status_code
        self.source = source
        super().__init__(message)


class IoTPayloadError(IoTError):
    """Document body is not valid JSON or not a JSON object."""

    def __init__(self, message: str, *, source: str = "") -> None:
        self.source = source
        super().__init__(message)
