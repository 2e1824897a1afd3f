"""Periodic callback scheduling on the running asyncio loop."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

_logger = logging.getLogger(__name__)

PollCallback = Callable[[], Any]
"""Zero-argument callable; may return an awaitable."""


class Poller:
    """Run a zero-argument callback every *interval* seconds.

    The first invocation happens one interval after :meth:`start`, not
    immediately. Each invocation runs in its own task so the timer keeps
    its cadence, but ticks are serialized: when the previous invocation
    is still pending at the next tick, that tick is skipped.

    :meth:`stop` only prevents future ticks; an invocation that is
    already running is left to finish.
    """

    def __init__(self, interval: float, *, name: str = "pyiothours-poller") -> None:
        self._interval = interval
        self._name = name
        self._task: asyncio.Task[None] | None = None
        self._inflight: asyncio.Task[None] | None = None
        self.skipped_ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._task is not None

    @property
    def inflight(self) -> asyncio.Task[None] | None:
        """The most recent callback invocation, if any."""
        return self._inflight

    def start(self, callback: PollCallback) -> bool:
        """Begin ticking. Returns ``False`` when already running.

        Must be called with an event loop running.
        """
        if self._task is not None:
            return False
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(callback), name=self._name)
        return True

    def stop(self) -> bool:
        """Cancel the timer. Returns ``False`` when it was not running."""
        task = self._task
        self._task = None
        if task is None:
            return False
        task.cancel()
        return True

    async def _run(self, callback: PollCallback) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._inflight is not None and not self._inflight.done():
                self.skipped_ticks += 1
                _logger.debug("Previous poll still running; skipping tick")
                continue
            self._inflight = asyncio.create_task(self._invoke(callback))

    async def _invoke(self, callback: PollCallback) -> None:
        try:
            result = callback()
            if inspect.isawaitable(result):
                await result
        except Exception:
            _logger.exception("Polling callback failed")
