from __future__ import annotations

import asyncio

import pytest

from pyiothours.poller import Poller


async def _wait_for(predicate, timeout: float = 1.0) -> None:
    async def _spin() -> None:
        while not predicate():
            await asyncio.sleep(0.005)

    await asyncio.wait_for(_spin(), timeout=timeout)


@pytest.mark.asyncio
async def test_first_tick_waits_one_interval() -> None:
    calls: list[int] = []
    poller = Poller(0.2)

    poller.start(lambda: calls.append(1))
    await asyncio.sleep(0.05)
    poller.stop()

    assert calls == []


@pytest.mark.asyncio
async def test_ticks_repeat_until_stopped() -> None:
    calls: list[int] = []
    poller = Poller(0.01)

    assert poller.start(lambda: calls.append(1)) is True
    await _wait_for(lambda: len(calls) >= 3)
    assert poller.stop() is True

    await asyncio.sleep(0)
    seen = len(calls)
    await asyncio.sleep(0.05)
    assert len(calls) == seen
    assert poller.is_running is False


@pytest.mark.asyncio
async def test_second_start_is_rejected_and_keeps_single_timer() -> None:
    poller = Poller(10.0, name="single-timer-test")

    assert poller.start(lambda: None) is True
    first_task = poller._task  # noqa: SLF001
    assert poller.start(lambda: None) is False

    assert poller._task is first_task  # noqa: SLF001
    timers = [t for t in asyncio.all_tasks() if t.get_name() == "single-timer-test"]
    assert len(timers) == 1
    poller.stop()


@pytest.mark.asyncio
async def test_stop_when_never_started_is_noop() -> None:
    poller = Poller(1.0)
    assert poller.stop() is False
    assert poller.is_running is False


@pytest.mark.asyncio
async def test_async_callback_is_awaited() -> None:
    done = asyncio.Event()

    async def _callback() -> None:
        await asyncio.sleep(0)
        done.set()

    poller = Poller(0.01)
    poller.start(_callback)
    await asyncio.wait_for(done.wait(), timeout=1.0)
    poller.stop()


@pytest.mark.asyncio
async def test_tick_is_skipped_while_previous_call_is_running() -> None:
    release = asyncio.Event()
    calls: list[int] = []

    async def _slow() -> None:
        calls.append(1)
        await release.wait()

    poller = Poller(0.01)
    poller.start(_slow)
    await _wait_for(lambda: poller.skipped_ticks >= 2)

    assert calls == [1]

    release.set()
    await _wait_for(lambda: len(calls) >= 2)
    poller.stop()


@pytest.mark.asyncio
async def test_stop_does_not_abort_inflight_call() -> None:
    release = asyncio.Event()
    finished: list[int] = []

    async def _slow() -> None:
        await release.wait()
        finished.append(1)

    poller = Poller(0.01)
    poller.start(_slow)
    await _wait_for(lambda: poller.inflight is not None)
    poller.stop()

    release.set()
    inflight = poller.inflight
    assert inflight is not None
    await asyncio.wait_for(inflight, timeout=1.0)
    assert finished == [1]


@pytest.mark.asyncio
async def test_failing_callback_keeps_polling(caplog: pytest.LogCaptureFixture) -> None:
    calls: list[int] = []

    def _boom() -> None:
        calls.append(1)
        raise RuntimeError("ui refresh failed")

    poller = Poller(0.01)
    poller.start(_boom)
    await _wait_for(lambda: len(calls) >= 2)
    poller.stop()

    assert "Polling callback failed" in caplog.text


def test_start_without_running_loop_raises() -> None:
    poller = Poller(1.0)
    with pytest.raises(RuntimeError):
        poller.start(lambda: None)
    assert poller.is_running is False
