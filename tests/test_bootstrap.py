"""Tests for the provider start-up retry loop."""

import pytest

from dexsolver.routing.bootstrap import Bootstrap, BootstrapState
from dexsolver.routing.errors import BootstrapTimeout


class FakeTime:
    """Clock that only moves when the bootstrap sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def clock(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


def attempts_failing(times: int, value="ready"):
    calls = {"count": 0}

    async def attempt():
        calls["count"] += 1
        if calls["count"] <= times:
            raise ConnectionError(f"attempt {calls['count']} failed")
        return value

    return attempt


class TestBootstrap:
    """Tests for the INITIALIZING -> READY | FATAL state machine."""

    @pytest.mark.asyncio
    async def test_ready_after_retries(self):
        """Test transient failures are retried on the fixed delay."""
        time = FakeTime()
        bootstrap = Bootstrap(
            attempts_failing(2), name="test", clock=time.clock, sleep=time.sleep
        )

        assert await bootstrap.run() == "ready"
        assert bootstrap.state == BootstrapState.READY
        assert bootstrap.attempts == 3
        assert time.sleeps == [1.0, 1.0]
        assert bootstrap.value == "ready"

    @pytest.mark.asyncio
    async def test_fatal_after_deadline(self):
        """Test failing past the deadline is final."""
        time = FakeTime()
        bootstrap = Bootstrap(
            attempts_failing(100), name="test", timeout=3, clock=time.clock, sleep=time.sleep
        )

        with pytest.raises(BootstrapTimeout) as exc_info:
            await bootstrap.run()

        assert bootstrap.state == BootstrapState.FATAL
        assert bootstrap.attempts == 5
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    @pytest.mark.asyncio
    async def test_final_states_do_not_change(self):
        """Test stepping after READY makes no further attempts."""
        time = FakeTime()
        bootstrap = Bootstrap(attempts_failing(0), clock=time.clock, sleep=time.sleep)

        assert await bootstrap.step() == BootstrapState.READY
        assert await bootstrap.step() == BootstrapState.READY
        assert bootstrap.attempts == 1

    @pytest.mark.asyncio
    async def test_failure_before_deadline_keeps_initializing(self):
        """Test one failure inside the window only schedules a retry."""
        time = FakeTime()
        bootstrap = Bootstrap(attempts_failing(1), clock=time.clock, sleep=time.sleep)

        assert await bootstrap.step() == BootstrapState.INITIALIZING
        assert isinstance(bootstrap.last_error, ConnectionError)
        with pytest.raises(RuntimeError):
            bootstrap.value

    def test_deadline(self):
        """Test the deadline is measured from construction."""
        time = FakeTime()
        time.now = 100.0
        bootstrap = Bootstrap(attempts_failing(0), timeout=10, clock=time.clock, sleep=time.sleep)

        assert bootstrap.deadline == 110.0

    @pytest.mark.asyncio
    async def test_late_run_keeps_construction_deadline(self):
        """Test a run started after the deadline gets a single attempt."""
        time = FakeTime()
        bootstrap = Bootstrap(attempts_failing(1), timeout=10, clock=time.clock, sleep=time.sleep)
        time.now = 20.0

        with pytest.raises(BootstrapTimeout):
            await bootstrap.run()

        assert bootstrap.attempts == 1
        assert time.sleeps == []
