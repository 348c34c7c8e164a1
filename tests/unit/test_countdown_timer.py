import asyncio

from flow_manager import CountdownTimer


def test_timer_ticks_until_stopped() -> None:
    async def scenario():
        ticks = []
        timer = CountdownTimer(lambda: ticks.append(1), interval=0.01)
        timer.start()
        assert timer.running
        while len(ticks) < 3:
            await asyncio.sleep(0.01)
        timer.stop()
        assert not timer.running
        count = len(ticks)
        await asyncio.sleep(0.05)
        return count, len(ticks)

    stopped_at, final = asyncio.run(scenario())
    assert stopped_at >= 3
    assert final == stopped_at


def test_restart_supersedes_previous_countdown() -> None:
    async def scenario():
        timer = CountdownTimer(lambda: None, interval=0.01)
        timer.start()
        previous = timer._task
        timer.start()
        await asyncio.sleep(0)
        superseded = previous.cancelled()
        timer.stop()
        return superseded

    assert asyncio.run(scenario()) is True


def test_failing_tick_keeps_timer_alive() -> None:
    async def scenario():
        calls = []

        def on_tick():
            calls.append(1)
            raise RuntimeError("tick failed")

        timer = CountdownTimer(on_tick, interval=0.01)
        timer.start()
        while len(calls) < 2:
            await asyncio.sleep(0.01)
        running = timer.running
        timer.stop()
        return running

    assert asyncio.run(scenario()) is True
