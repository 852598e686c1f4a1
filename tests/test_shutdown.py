"""
Tests for the signal/deadline cancellation scope.
"""

import asyncio
import signal

import pytest

from toolprobe.utils.errors import ProbeTimeoutError, ShutdownRequested
from toolprobe.utils.shutdown import CancellationScope


class TestCancellationScope:
    """Test deadline and signal cancellation."""

    @pytest.mark.asyncio
    async def test_returns_result(self):
        async def work():
            return 42

        assert await CancellationScope(timeout=5).run(work()) == 42

    @pytest.mark.asyncio
    async def test_deadline_raises_timeout(self):
        with pytest.raises(ProbeTimeoutError) as exc_info:
            await CancellationScope(timeout=0.05).run(asyncio.sleep(10))
        assert exc_info.value.context.metadata["timeout"] == 0.05
        assert exc_info.value.context.operation == "deadline"

    @pytest.mark.asyncio
    async def test_signal_raises_shutdown(self):
        scope = CancellationScope(timeout=5)

        async def work():
            scope.cancel(signal.SIGTERM)
            await asyncio.sleep(10)

        with pytest.raises(ShutdownRequested) as exc_info:
            await scope.run(work())
        assert exc_info.value.signum == signal.SIGTERM
        assert scope.received_signal == signal.SIGTERM

    @pytest.mark.asyncio
    async def test_second_signal_ignored(self):
        scope = CancellationScope(timeout=5)

        async def work():
            scope.cancel(signal.SIGINT)
            scope.cancel(signal.SIGTERM)
            await asyncio.sleep(10)

        with pytest.raises(ShutdownRequested):
            await scope.run(work())
        assert scope.received_signal == signal.SIGINT

    @pytest.mark.asyncio
    async def test_handlers_restored(self):
        before = signal.getsignal(signal.SIGINT)

        async def work():
            return None

        await CancellationScope(timeout=5).run(work())
        assert signal.getsignal(signal.SIGINT) == before

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        async def work():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            await CancellationScope(timeout=5).run(work())

    def test_non_positive_timeout_disables_deadline(self):
        assert CancellationScope(timeout=0).timeout is None
        assert CancellationScope(timeout=-3).timeout is None
        assert CancellationScope(timeout=2.5).timeout == 2.5
