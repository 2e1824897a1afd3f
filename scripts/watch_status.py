#!/usr/bin/env python3
"""Watch an equipment-hours telemetry source from the terminal.

Prints the freshness status once, then (with ``--watch``) keeps polling
at the configured interval and prints every merged equipment record.

Usage
-----
::

    export IOT_DATA_SOURCE="https://plant.example/iot_data.json"
    python scripts/watch_status.py --equipment EQ-001 EQ-002 --watch

Options::

    --source LOCATION    Path or URL of the document (default: $IOT_DATA_SOURCE)
    --interval SECONDS   Poll interval (default: $IOT_POLL_INTERVAL or 30)
    --equipment NUM ...  Equipment numbers to merge readings into
    --watch              Keep polling until interrupted
    --json               Output machine-readable JSON
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
from typing import Any

from pyiothours import IoTConfig, IoTDataClient


def _print_report(client: IoTDataClient, report: dict[str, Any], records: list[dict[str, Any]], json_mode: bool) -> None:
    if json_mode:
        print(json.dumps({"status": report, "equipment": records}, ensure_ascii=False))
        return
    print(f"[{report['status']:>7}] {report['message']}  (last update: {report['lastUpdate']})")
    for record in records:
        hours = record.get("currentHours", "-")
        print(f"    {record['equipmentNumber']:<12} hours={hours}")
    result = client.last_result
    if result is not None and not result.ok:
        print(f"    fetch failed ({result.reason}): {result.error}")


async def main() -> None:
    parser = argparse.ArgumentParser(description="Watch an equipment-hours telemetry source.")
    parser.add_argument("--source", help="Path or URL of the telemetry document")
    parser.add_argument("--interval", type=float, help="Poll interval in seconds")
    parser.add_argument("--equipment", nargs="*", default=[], help="Equipment numbers to merge into")
    parser.add_argument("--watch", action="store_true", help="Keep polling until interrupted")
    parser.add_argument("--json", action="store_true", dest="json_mode", help="Output machine-readable JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.source:
        overrides["source"] = args.source
    if args.interval:
        overrides["poll_interval"] = args.interval
    config = IoTConfig.from_env(**overrides)

    records: list[dict[str, Any]] = [{"equipmentNumber": number} for number in args.equipment]

    async with IoTDataClient(config) as client:

        async def _refresh() -> None:
            await client.merge_telemetry(records)
            report = await client.get_status()
            _print_report(client, report.to_dict(), records, args.json_mode)

        await _refresh()
        if not args.watch:
            return

        client.start_polling(_refresh)
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.Event().wait()


if __name__ == "__main__":
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(main())
