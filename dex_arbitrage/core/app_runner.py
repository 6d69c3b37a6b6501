from __future__ import annotations

import asyncio
import logging
import signal
from typing import Any

from dex_arbitrage.services.scanner import ScannerOrchestrator

log = logging.getLogger(__name__)


def next_deadline(deadline: float, now: float, interval: float) -> tuple[float, int]:
    """Advance ``deadline`` by one interval, skipping ticks already in the past.

    Returns the first tick boundary not earlier than ``now`` and the number
    of ticks skipped to reach it.
    """
    deadline += interval
    if now <= deadline:
        return deadline, 0
    skipped = int((now - deadline) // interval) + 1
    return deadline + skipped * interval, skipped


class AppRunner:
    """Runs scan cycles on a fixed period until stopped.

    The first cycle starts immediately. Cycles never overlap: ticks that
    pass while a cycle is still running are dropped.
    """

    def __init__(self, orchestrator: ScannerOrchestrator, interval_sec: float) -> None:
        if interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        self._orchestrator = orchestrator
        self._interval = interval_sec
        self._stop_event = asyncio.Event()
        self._tasks: list[asyncio.Task[None]] = []
        self.cycles = 0
        self.skipped_ticks = 0

    def setup_signal_handlers(self) -> None:
        """Setup signal handlers for graceful shutdown."""
        loop = asyncio.get_running_loop()

        def _handle_stop(*_: Any) -> None:
            log.info("Received shutdown signal")
            self._stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, _handle_stop)
            except NotImplementedError:
                # Windows doesn't support all signals
                pass

    async def start(self) -> None:
        log.info("Starting scanner loop (interval %.1fs)", self._interval)
        self._tasks.append(asyncio.create_task(self._scan_loop(), name="scan-loop"))

    async def run_once(self) -> None:
        await self._run_cycle()

    async def _run_cycle(self) -> None:
        self.cycles += 1
        try:
            opportunities = await self._orchestrator.run_cycle()
            log.info("Scan cycle %d: found %d opportunities", self.cycles, len(opportunities))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            log.exception("Error in scan cycle %d: %s (continuing)", self.cycles, exc)

    async def _scan_loop(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        try:
            while not self._stop_event.is_set():
                await self._run_cycle()
                deadline, skipped = next_deadline(deadline, loop.time(), self._interval)
                if skipped:
                    self.skipped_ticks += skipped
                    log.warning("Scan cycle %d overran the interval; skipping %d tick(s)", self.cycles, skipped)
                try:
                    await asyncio.wait_for(self._stop_event.wait(), timeout=max(0.0, deadline - loop.time()))
                except asyncio.TimeoutError:
                    pass
        except asyncio.CancelledError:
            log.info("Scan loop cancelled after %d cycles", self.cycles)
            return

    def request_stop(self) -> None:
        self._stop_event.set()

    async def stop(self) -> None:
        """Stop the loop, letting a running cycle finish, and release resources."""
        log.info("Stopping application runner")
        self._stop_event.set()
        await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks.clear()
        log.info("Application runner stopped")

    async def wait(self) -> None:
        """Wait for shutdown signal."""
        await self._stop_event.wait()
