"""Fixed-interval status polling on the asyncio loop"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

TickFn = Callable[[], Awaitable[None]]
SleepFn = Callable[[float], Awaitable[None]]


class PollHandle:
    """Cancellation handle for one running poll loop"""

    def __init__(self, name: str):
        self.name = name
        self.task: Optional[asyncio.Task] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def active(self) -> bool:
        return not self._cancelled and self.task is not None and not self.task.done()

    def cancel(self) -> None:
        """Stop the loop. Safe to call repeatedly and from inside a tick."""
        if self._cancelled:
            return
        self._cancelled = True
        # A tick cancelling its own loop just lets the while-condition end it
        if self.task is not None and self.task is not asyncio.current_task():
            self.task.cancel()


class PollingLoop:
    """
    Owns at most one poll task at a time.

    ``start`` cancels the running loop before arming the new one. The first
    tick fires after one full interval. Errors raised by a tick are logged
    and the loop keeps polling.
    """

    def __init__(self, sleep: SleepFn = asyncio.sleep):
        self._sleep = sleep
        self._handle: Optional[PollHandle] = None

    @property
    def handle(self) -> Optional[PollHandle]:
        return self._handle

    @property
    def active(self) -> bool:
        return self._handle is not None and not self._handle.cancelled

    def start(self, interval_ms: int, on_tick: TickFn, name: str = "poll") -> PollHandle:
        self.cancel()
        handle = PollHandle(name)
        handle.task = asyncio.create_task(self._run(handle, max(1, int(interval_ms)) / 1000, on_tick))
        self._handle = handle
        logger.debug(f"Armed {name} loop every {interval_ms} ms")
        return handle

    def cancel(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None and not handle.cancelled:
            handle.cancel()
            logger.debug(f"Cancelled {handle.name} loop")

    async def _run(self, handle: PollHandle, interval: float, on_tick: TickFn) -> None:
        while not handle.cancelled:
            await self._sleep(interval)
            if handle.cancelled:
                break
            try:
                await on_tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error(f"{handle.name} tick failed: {e}")
