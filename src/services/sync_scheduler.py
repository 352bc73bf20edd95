# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Background scheduler that runs the currency sync on a cadence."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime, time, timedelta
from enum import StrEnum
from typing import Any, ClassVar

from src.config import Settings

logger = logging.getLogger(__name__)

SyncCycle = Callable[[], Awaitable[Any]]


class SchedulerState(StrEnum):
    """Lifecycle states of the scheduler loop."""

    IDLE = "idle"
    WAITING = "waiting"
    RUNNING = "running"
    STOPPING = "stopping"
    TERMINATED = "terminated"


class SchedulePolicy(ABC):
    """Decides when the next sync cycle is due."""

    @abstractmethod
    def next_deadline(self, now: datetime) -> datetime:
        """Return the moment the next cycle should start."""
        ...


class DailyAtTime(SchedulePolicy):
    """Run once a day at a fixed time of day."""

    def __init__(self, at: time) -> None:
        self.at = at

    def next_deadline(self, now: datetime) -> datetime:
        scheduled = datetime.combine(now.date(), self.at, tzinfo=now.tzinfo)
        if scheduled <= now:
            scheduled += timedelta(days=1)
        return scheduled

    def __repr__(self) -> str:
        return f"DailyAtTime({self.at.isoformat()})"


class FixedInterval(SchedulePolicy):
    """Run repeatedly, a fixed interval after the previous cycle ended."""

    def __init__(self, every: timedelta) -> None:
        if every <= timedelta(0):
            raise ValueError("Sync interval must be positive")
        self.every = every

    def next_deadline(self, now: datetime) -> datetime:
        return now + self.every

    def __repr__(self) -> str:
        return f"FixedInterval({self.every})"


def parse_sync_time(raw: str) -> time:
    """Parse an HH:MM (or HH:MM:SS) time of day, falling back to midnight."""
    try:
        return time.fromisoformat(raw.strip())
    except ValueError:
        logger.warning(f"Invalid SYNC_TIME {raw!r}, using 00:00")
        return time(0, 0)


def build_schedule_policy(settings: Settings) -> SchedulePolicy:
    """Select the schedule policy from configuration.

    An interval, when configured, takes precedence over the daily time.
    A non-positive interval is ignored with a warning, like an invalid
    daily time.
    """
    minutes = settings.sync_interval_minutes
    if minutes is not None:
        if minutes > 0:
            return FixedInterval(timedelta(minutes=minutes))
        logger.warning(
            f"Invalid SYNC_INTERVAL_MINUTES {minutes}, using daily schedule"
        )
    return DailyAtTime(parse_sync_time(settings.sync_time))


class CurrencySyncScheduler:
    """Long-running task that triggers a sync cycle per the schedule policy.

    A failing cycle is logged and the loop moves on to the next deadline.
    Stopping while waiting ends the loop without starting a cycle.
    """

    _instance: ClassVar[CurrencySyncScheduler | None] = None

    def __init__(
        self,
        policy: SchedulePolicy,
        cycle: SyncCycle,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """Initialize the scheduler.

        Args:
            policy: Schedule policy computing the next deadline.
            cycle: Coroutine function running one sync cycle.
            clock: Source of the current time.
        """
        self.policy = policy
        self._cycle = cycle
        self._clock = clock
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task[None] | None = None
        self.state = SchedulerState.IDLE

    @classmethod
    def create_instance(
        cls,
        policy: SchedulePolicy,
        cycle: SyncCycle,
        clock: Callable[[], datetime] = datetime.now,
    ) -> CurrencySyncScheduler:
        """Create the process-wide scheduler.

        Raises:
            RuntimeError: If a scheduler already exists.
        """
        if cls._instance is not None:
            raise RuntimeError("A currency sync scheduler is already running")
        cls._instance = cls(policy, cycle, clock)
        return cls._instance

    @classmethod
    def get_instance(cls) -> CurrencySyncScheduler | None:
        """Get the process-wide scheduler, if one was created."""
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Forget the singleton instance (for testing)."""
        cls._instance = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the background loop on the running event loop."""
        if self.is_running:
            return
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run())
        logger.info(f"Currency sync scheduler started ({self.policy!r})")

    async def stop(self) -> None:
        """Stop the background loop and wait for it to finish."""
        self._stop_event.set()
        if self._task is None:
            return
        if not self._task.done():
            self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.state = SchedulerState.TERMINATED
        logger.info("Currency sync scheduler stopped")

    async def _wait(self, delay: float) -> bool:
        """Sleep until the deadline. Returns True if a stop was requested."""
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
        except TimeoutError:
            return False
        return True

    async def run(self) -> None:
        """Wait for each deadline and run one cycle, until stopped."""
        try:
            while not self._stop_event.is_set():
                now = self._clock()
                deadline = self.policy.next_deadline(now)
                delay = max((deadline - now).total_seconds(), 0.0)

                self.state = SchedulerState.WAITING
                logger.info(
                    f"Next sync scheduled at {deadline.isoformat()} "
                    f"(in {timedelta(seconds=round(delay))})"
                )
                if await self._wait(delay):
                    self.state = SchedulerState.STOPPING
                    break

                self.state = SchedulerState.RUNNING
                logger.info("Starting scheduled currency sync...")
                try:
                    await self._cycle()
                    logger.info("Scheduled currency sync completed")
                except Exception:
                    logger.exception("Error occurred during scheduled currency sync")
        except asyncio.CancelledError:
            self.state = SchedulerState.STOPPING
            logger.info("Currency sync scheduler is stopping")
        finally:
            self.state = SchedulerState.TERMINATED
