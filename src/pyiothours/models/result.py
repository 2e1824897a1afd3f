"""Explicit outcome of a single telemetry retrieval."""

from __future__ import annotations

from enum import StrEnum

from pyiothours.models._base import IoTBaseModel
from pyiothours.models.telemetry import TelemetryDocument


class FetchFailure(StrEnum):
    """Why a retrieval produced no document."""

    TRANSPORT = "transport"
    PARSE = "parse"
    INVALID = "invalid"


class FetchResult(IoTBaseModel):
    """Either a parsed document or the reason there is none."""

    source: str
    document: TelemetryDocument | None = None
    reason: FetchFailure | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.document is not None

    @classmethod
    def success(cls, source: str, document: TelemetryDocument) -> FetchResult:
        return cls(source=source, document=document)

    @classmethod
    def failure(cls, source: str, reason: FetchFailure, error: str) -> FetchResult:
        return cls(source=source, reason=reason, error=error)
