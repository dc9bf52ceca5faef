from __future__ import annotations

import asyncio
import logging
import random
from typing import Callable, List, Optional, Protocol

from .models import ActivityEvent, EventAction, Threat
from .monitor import SecurityMonitor


logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Ticker(Protocol):
    def start(self, callback: TickCallback) -> None:
        ...

    def stop(self) -> None:
        ...


class AsyncioTicker:
    """Schedules the callback every ``interval`` seconds from the running event loop.

    The callback runs in the loop's default executor so a slow tick never stalls
    request handling.
    """

    def __init__(self, interval: float):
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    def start(self, callback: TickCallback) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run(callback))

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, callback: TickCallback) -> None:
        loop = asyncio.get_running_loop()
        while True:
            await asyncio.sleep(self.interval)
            try:
                # ticks take the monitor lock and may publish notifications
                await loop.run_in_executor(None, callback)
            except Exception:
                logger.exception("Scheduled tick failed")


class ManualTicker:
    """Ticker driven explicitly by the caller, for tests and scripted demos."""

    def __init__(self):
        self._callback: Optional[TickCallback] = None

    def start(self, callback: TickCallback) -> None:
        self._callback = callback

    def stop(self) -> None:
        self._callback = None

    @property
    def running(self) -> bool:
        return self._callback is not None

    def advance(self, ticks: int = 1) -> None:
        if self._callback is None:
            raise RuntimeError("ticker has not been started")
        for _ in range(ticks):
            self._callback()


class ActivityScheduler:
    def __init__(
        self,
        monitor: SecurityMonitor,
        ticker: Ticker,
        rng: random.Random | None = None,
    ):
        self.monitor = monitor
        self.ticker = ticker
        self.rng = rng or random.Random()

    def start(self) -> None:
        self.ticker.start(self.tick)

    def stop(self) -> None:
        self.ticker.stop()

    def tick(self) -> List[Threat]:
        """Append one synthetic benign event for a random known user, then detect."""
        users = self.monitor.known_users()
        if not users:
            return self.monitor.run_detection()
        event = ActivityEvent(
            timestamp=self.monitor.clock(),
            user=self.rng.choice(users),
            action=EventAction.FILE_ACCESS,
            details=dict(self.monitor.config.benign_event_details),
        )
        return self.monitor.ingest(event)

    def simulate_anomaly(self) -> ActivityEvent:
        config = self.monitor.config
        event = ActivityEvent(
            timestamp=self.monitor.clock(),
            user=config.anomaly_user,
            action=EventAction.LOGIN,
            details=dict(config.anomaly_event_details),
        )
        self.monitor.ingest(event)
        return event
