"""Background reclamation of expired objects."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Protocol

from .storage.object_registry import utc_now
from .storage.storage_models import SweepReport

logger = logging.getLogger(__name__)

DEFAULT_SWEEP_INTERVAL_SECONDS = 60.0


class SupportsSweep(Protocol):
    def sweep_expired(self, now: datetime | None = None) -> SweepReport:
        ...


def reclamation_once(*, store: SupportsSweep, now: datetime | None = None) -> SweepReport:
    """Run a single sweep and log what it removed."""

    current = now or utc_now()
    report = store.sweep_expired(current)
    if report.removed or report.failures:
        logger.info(
            "Reclaimed %s expired objects (%s payload deletions failed)",
            len(report.removed),
            len(report.failures),
        )
    return report


async def run_periodic_reclamation(
    *,
    store: SupportsSweep,
    shutdown_event: asyncio.Event,
    interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
    clock: Callable[[], datetime] | None = None,
) -> None:
    """Sweep immediately, then every ``interval_seconds`` until shutdown is signalled.

    The sweep runs in a worker thread and is never cancelled midway: setting
    ``shutdown_event`` only prevents the next iteration.
    """

    interval = max(0.01, float(interval_seconds))
    tick = clock or utc_now
    while not shutdown_event.is_set():
        now = tick()
        try:
            await asyncio.to_thread(reclamation_once, store=store, now=now)
        except Exception:
            logger.exception("Reclamation sweep failed")
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=interval)
        except asyncio.TimeoutError:
            continue


class ReclamationScheduler:
    """Start/stop handle around :func:`run_periodic_reclamation`.

    ``start`` on a running scheduler and ``stop`` on an idle one are no-ops.
    """

    def __init__(
        self,
        store: SupportsSweep,
        *,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._interval = interval_seconds
        self._clock = clock
        self._task: asyncio.Task[None] | None = None
        self._shutdown_event: asyncio.Event | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> bool:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            logger.info("Reclamation scheduler already running")
            return False
        shutdown_event = asyncio.Event()
        self._shutdown_event = shutdown_event
        self._task = asyncio.get_running_loop().create_task(
            run_periodic_reclamation(
                store=self._store,
                shutdown_event=shutdown_event,
                interval_seconds=self._interval,
                clock=self._clock,
            ),
            name="tempdrop-reclamation",
        )
        logger.info("Reclamation scheduler started (every %ss)", self._interval)
        return True

    async def stop(self) -> bool:
        """Prevent further sweeps and wait for an in-progress one to finish."""
        task, shutdown_event = self._task, self._shutdown_event
        self._task = None
        self._shutdown_event = None
        if task is None:
            return False
        if shutdown_event is not None:
            shutdown_event.set()
        await task
        logger.info("Reclamation scheduler stopped")
        return True


__all__ = [
    "ReclamationScheduler",
    "SupportsSweep",
    "reclamation_once",
    "run_periodic_reclamation",
]
