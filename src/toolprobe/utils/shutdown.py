"""
Signal and deadline handling for a probe run.

A single CancellationScope wraps the whole run: the run task is cancelled
when the deadline expires or when SIGINT/SIGTERM arrives, whichever comes
first.
"""

import asyncio
import signal
import sys
from typing import Any, Awaitable, Dict, Iterable, Optional

from .logging import get_logger
from .errors import ErrorContext, ProbeTimeoutError, ShutdownRequested


logger = get_logger("toolprobe.shutdown")

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class CancellationScope:
    """Races a deadline against OS termination signals for one coroutine."""

    def __init__(
        self,
        timeout: Optional[float] = None,
        signals: Iterable[int] = DEFAULT_SIGNALS,
    ):
        """
        Initialize the scope.

        Args:
            timeout: Deadline in seconds; None or <= 0 disables it
            signals: Signals that cancel the run
        """
        self.timeout = timeout if timeout and timeout > 0 else None
        self.signals = tuple(signals)
        self.received_signal: Optional[int] = None
        self._task: Optional[asyncio.Task] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._original_handlers: Dict[int, Any] = {}

    async def run(self, coro: Awaitable[Any]) -> Any:
        """
        Run a coroutine inside the scope.

        Raises:
            ProbeTimeoutError: the deadline expired first
            ShutdownRequested: a termination signal arrived first
        """
        self._loop = asyncio.get_running_loop()
        self._task = asyncio.ensure_future(coro)
        self.setup_signal_handlers()

        try:
            return await asyncio.wait_for(self._task, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            logger.warning("client_timeout_reached", timeout=self.timeout)
            raise ProbeTimeoutError(
                f"Client timeout reached after {self.timeout:g}s",
                context=ErrorContext(component="shutdown", operation="deadline"),
                timeout=self.timeout
            ) from e
        except asyncio.CancelledError:
            if self.received_signal is None:
                raise
            raise ShutdownRequested(self.received_signal) from None
        finally:
            self.restore_signal_handlers()

    def cancel(self, signum: int) -> None:
        """Record the signal and cancel the running task."""
        if self.received_signal is not None:
            return
        self.received_signal = signum
        logger.info("shutdown_signal_received", signal=signal.Signals(signum).name)
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def setup_signal_handlers(self) -> None:
        """Set up signal handlers that cancel the run."""
        for sig in self.signals:
            self._original_handlers[sig] = signal.getsignal(sig)
            if sys.platform == "win32":
                signal.signal(sig, self._signal_handler)
            else:
                self._loop.add_signal_handler(sig, self.cancel, sig)

        logger.debug("signal_handlers_installed", signals=[signal.Signals(s).name for s in self.signals])

    def restore_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        for sig, handler in self._original_handlers.items():
            if sys.platform != "win32":
                self._loop.remove_signal_handler(sig)
            signal.signal(sig, handler)

        self._original_handlers.clear()
        logger.debug("signal_handlers_restored")

    def _signal_handler(self, signum: int, frame: Any) -> None:
        """Handle a signal delivered outside the event loop (Windows)."""
        self._loop.call_soon_threadsafe(self.cancel, signum)


__all__ = [
    'CancellationScope',
    'DEFAULT_SIGNALS',
]
