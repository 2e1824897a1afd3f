"""High-level async client: fetch, merge and classify equipment-hours telemetry."""

from __future__ import annotations

import logging
from collections.abc import Callable, MutableMapping, Sequence
from datetime import UTC, datetime
from typing import Any, TypeVar

import aiohttp
from pydantic import ValidationError

from pyiothours._transport import (
    DocumentSource,
    FileDocumentSource,
    HttpDocumentSource,
    file_path_from_location,
    is_http_location,
)
from pyiothours.config import IoTConfig
from pyiothours.exceptions import IoTPayloadError, IoTTransportError
from pyiothours.freshness import UNAVAILABLE_MESSAGE, classify_freshness, format_local_timestamp
from pyiothours.merge import apply_telemetry
from pyiothours.models.result import FetchFailure, FetchResult
from pyiothours.models.status import NEVER, IoTStatus, StatusReport
from pyiothours.models.telemetry import TelemetryDocument
from pyiothours.poller import PollCallback, Poller

_logger = logging.getLogger(__name__)

RecordsT = TypeVar("RecordsT", bound=Sequence[MutableMapping[str, Any]])


def _utcnow() -> datetime:
    return datetime.now(UTC)


class IoTDataClient:
    """Poll a JSON telemetry document and merge it into equipment records.

    Each instance owns its own timer and HTTP session, so a host can run
    several independent clients side by side.

    Usage::

        async with IoTDataClient(IoTConfig(source="https://example/iot_data.json")) as client:
            report = await client.get_status()
            client.start_polling(refresh_table)
    """

    def __init__(
        self,
        config: IoTConfig | None = None,
        *,
        source: DocumentSource | None = None,
        session: aiohttp.ClientSession | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._config = config if config is not None else IoTConfig()
        self._source = source
        self._owns_source = source is None
        self._external_session = session is not None
        self._http_session = session
        self._clock = clock
        self._poller = Poller(self._config.poll_interval)
        self._last_result: FetchResult | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> IoTDataClient:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Stop polling and release the HTTP session if this client created it."""
        self.stop_polling()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if self._owns_source:
            self._source = None

    @property
    def config(self) -> IoTConfig:
        return self._config

    @property
    def is_polling(self) -> bool:
        return self._poller.is_running

    @property
    def last_result(self) -> FetchResult | None:
        """Outcome of the most recent retrieval, ``None`` before the first one."""
        return self._last_result

    def _require_source(self) -> DocumentSource:
        if self._source is not None:
            return self._source
        location = self._config.source
        if is_http_location(location):
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._source = HttpDocumentSource(
                location,
                self._http_session,
                timeout=self._config.request_timeout,
            )
        else:
            self._source = FileDocumentSource(file_path_from_location(location))
        return self._source

    # ------------------------------------------------------------------
    # Retrieval
    # ------------------------------------------------------------------

    async def fetch_result(self) -> FetchResult:
        """Retrieve and validate the document, reporting failures as a value.

        Transport, JSON and schema failures are logged and returned as a
        not-ok :class:`FetchResult`; they are never raised.
        """
        source = self._require_source()
        location = source.location
        try:
            payload = await source.fetch_document()
            document = TelemetryDocument.model_validate(payload)
        except IoTTransportError as exc:
            result = FetchResult.failure(location, FetchFailure.TRANSPORT, str(exc))
        except IoTPayloadError as exc:
            result = FetchResult.failure(location, FetchFailure.PARSE, str(exc))
        except ValidationError as exc:
            result = FetchResult.failure(location, FetchFailure.INVALID, str(exc))
        else:
            _logger.debug("IoT data fetched from %s: %s", location, document)
            result = FetchResult.success(location, document)

        if not result.ok:
            _logger.warning("Error fetching IoT data (%s): %s", result.reason, result.error)
        self._last_result = result
        return result

    async def fetch_telemetry(self) -> TelemetryDocument | None:
        """Retrieve the document, or ``None`` when it is unavailable."""
        result = await self.fetch_result()
        return result.document

    async def manual_refresh(self) -> TelemetryDocument | None:
        """User-triggered fetch outside the polling cadence."""
        _logger.info("Manually refreshing IoT data")
        return await self.fetch_telemetry()

    # ------------------------------------------------------------------
    # Merge and status
    # ------------------------------------------------------------------

    async def merge_telemetry(self, equipment_records: RecordsT) -> RecordsT:
        """Fetch the document and copy its reading into matching records.

        Returns *equipment_records* itself. When no document is available
        or it carries no equipment mapping, nothing is touched.
        """
        document = await self.fetch_telemetry()
        if document is None or document.equipment_mapping is None:
            _logger.info("No IoT data available or no equipment mapping")
            return equipment_records

        apply_telemetry(document, equipment_records)
        return equipment_records

    async def get_status(self) -> StatusReport:
        """Fetch the document and classify how fresh its reading is."""
        document = await self.fetch_telemetry()
        if document is None:
            return StatusReport(status=IoTStatus.OFFLINE, message=UNAVAILABLE_MESSAGE, last_update=NEVER)

        last_updated = document.last_updated_at
        freshness = classify_freshness(last_updated, self._clock())
        return StatusReport(
            status=freshness.status,
            message=freshness.message,
            last_update=format_local_timestamp(last_updated, self._config.timestamp_format),
            device_id=document.device_id,
            current_hours=document.current_hours,
        )

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------

    def start_polling(self, callback: PollCallback) -> None:
        """Invoke *callback* every ``poll_interval`` seconds until stopped.

        The first call happens after one interval. Calling this while
        polling is already enabled does nothing.
        """
        if self._poller.is_running:
            _logger.info("Auto-update already enabled")
            return
        self._poller.start(callback)
        _logger.info("Starting IoT auto-update every %.1fs", self._poller.interval)

    def stop_polling(self) -> None:
        """Cancel the timer; an invocation already in progress is not aborted."""
        if self._poller.stop():
            _logger.info("IoT auto-update stopped")
