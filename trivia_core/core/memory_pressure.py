"""
Memory pressure monitor for in-process caches.

Periodically sums the approximate memory of every registered cache and
classifies the total into a pressure level:

- LOW: no action
- MEDIUM: moderate cleanup, each cache shrinks toward a fraction of its limits
- HIGH: aggressive cleanup, each cache is cleared and background preloads stop

Caches are peers implementing the ManagedCache contract; the monitor never
owns their state.
"""

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol, runtime_checkable

from loguru import logger

from trivia_core.core.diagnostics import DiagnosticsLog, ErrorSeverity

EVENT_LOG_SIZE = 50


@runtime_checkable
class ManagedCache(Protocol):
    """Eviction contract shared by every cache the monitor coordinates."""

    cache_name: str

    def memory_usage_kb(self) -> int:
        ...

    def shrink(self, ratio: float) -> int:
        ...

    def clear(self) -> None:
        ...

    def cancel_background_work(self) -> int:
        ...


class PressureLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class MemorySnapshot:
    """Memory usage at one point in time."""
    total_kb: int
    level: PressureLevel
    per_cache_kb: dict[str, int] = field(default_factory=dict)
    taken_at: datetime = field(default_factory=datetime.now)


@dataclass
class MonitorStatus:
    """Current monitor status."""
    is_running: bool = False
    last_check_at: datetime | None = None
    last_level: PressureLevel = PressureLevel.LOW
    last_total_kb: int = 0
    total_checks: int = 0
    moderate_cleanups: int = 0
    aggressive_cleanups: int = 0
    peer_failures: int = 0


class MemoryPressureMonitor:
    """
    Tiered cleanup coordinator over ManagedCache peers.

    Usage:
        monitor = MemoryPressureMonitor(medium_threshold_kb=50 * 1024,
                                        high_threshold_kb=100 * 1024)
        monitor.register(content_cache)
        monitor.start()
        # ... game runs ...
        await monitor.stop()
    """

    def __init__(
        self,
        medium_threshold_kb: int = 50 * 1024,
        high_threshold_kb: int = 100 * 1024,
        interval_seconds: float = 60.0,
        shrink_ratio: float = 0.5,
        diagnostics: DiagnosticsLog | None = None,
    ):
        if medium_threshold_kb > high_threshold_kb:
            raise ValueError("medium_threshold_kb must not exceed high_threshold_kb")

        self.medium_threshold_kb = medium_threshold_kb
        self.high_threshold_kb = high_threshold_kb
        self.interval_seconds = interval_seconds
        self.shrink_ratio = shrink_ratio
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticsLog()

        self._peers: list[ManagedCache] = []
        self._events: deque[str] = deque(maxlen=EVENT_LOG_SIZE)
        self._status = MonitorStatus()
        self._task: asyncio.Task | None = None

    @property
    def status(self) -> MonitorStatus:
        return self._status

    @property
    def peers(self) -> list[ManagedCache]:
        return list(self._peers)

    def register(self, cache: ManagedCache) -> None:
        if any(peer is cache for peer in self._peers):
            return
        self._peers.append(cache)
        logger.debug("Registered cache '{}' with memory monitor", cache.cache_name)

    def unregister(self, cache: ManagedCache) -> bool:
        for index, peer in enumerate(self._peers):
            if peer is cache:
                del self._peers[index]
                return True
        return False

    # ========================================
    # Sampling
    # ========================================

    def classify(self, total_kb: int) -> PressureLevel:
        if total_kb < self.medium_threshold_kb:
            return PressureLevel.LOW
        if total_kb < self.high_threshold_kb:
            return PressureLevel.MEDIUM
        return PressureLevel.HIGH

    def sample(self) -> MemorySnapshot:
        """Sum memory across peers. A peer that cannot report counts as 0."""
        per_cache: dict[str, int] = {}
        for peer in self._peers:
            try:
                per_cache[peer.cache_name] = int(peer.memory_usage_kb())
            except Exception as exc:
                self._status.peer_failures += 1
                self.diagnostics.record(
                    exc,
                    severity=ErrorSeverity.MEDIUM,
                    details=f"memory sample of '{peer.cache_name}' failed",
                )
                per_cache[peer.cache_name] = 0

        total = sum(per_cache.values())
        return MemorySnapshot(total_kb=total, level=self.classify(total), per_cache_kb=per_cache)

    async def check_now(self) -> MemorySnapshot:
        """
        Sample memory and clean up according to the pressure level.

        Returns:
            The snapshot taken before cleanup
        """
        snapshot = self.sample()
        previous = self._status.last_level

        self._status.total_checks += 1
        self._status.last_check_at = snapshot.taken_at
        self._status.last_level = snapshot.level
        self._status.last_total_kb = snapshot.total_kb

        if snapshot.level != previous:
            self._log_event(
                f"Memory pressure changed from {previous.value} to {snapshot.level.value} "
                f"({snapshot.total_kb} KB)"
            )

        if snapshot.level == PressureLevel.MEDIUM:
            self._moderate_cleanup()
        elif snapshot.level == PressureLevel.HIGH:
            self._aggressive_cleanup()
        return snapshot

    # ========================================
    # Cleanup
    # ========================================

    def _moderate_cleanup(self) -> None:
        released = 0
        for peer in self._peers:
            try:
                released += peer.shrink(self.shrink_ratio)
            except Exception as exc:
                self._peer_failed(peer, exc, "shrink")
        self._status.moderate_cleanups += 1
        self._log_event(f"Performed moderate cleanup ({released} KB released)")

    def _aggressive_cleanup(self) -> None:
        cancelled = 0
        for peer in self._peers:
            try:
                cancelled += peer.cancel_background_work()
                peer.clear()
            except Exception as exc:
                self._peer_failed(peer, exc, "clear")
        self._status.aggressive_cleanups += 1
        self._log_event(
            f"Performed aggressive cleanup - cleared {len(self._peers)} cache(s), "
            f"cancelled {cancelled} background task(s)"
        )

    def _peer_failed(self, peer: ManagedCache, exc: Exception, operation: str) -> None:
        self._status.peer_failures += 1
        self.diagnostics.record(
            exc,
            severity=ErrorSeverity.HIGH,
            details=f"{operation} of '{peer.cache_name}' failed",
        )

    async def force_optimization(self) -> None:
        """Aggressive cleanup regardless of the current pressure."""
        self._aggressive_cleanup()
        self._log_event("Force optimization completed")

    # ========================================
    # Periodic Loop
    # ========================================

    def start(self) -> bool:
        """
        Start periodic checks on the running event loop.

        Returns:
            False if the monitor was already running
        """
        if self._task is not None and not self._task.done():
            logger.warning("Memory monitor already running")
            return False

        self._task = asyncio.get_running_loop().create_task(self._run())
        self._status.is_running = True
        logger.info("Memory monitor started (interval: {}s)", self.interval_seconds)
        return True

    async def stop(self) -> None:
        """Stop periodic checks and wait for the loop to exit."""
        task, self._task = self._task, None
        self._status.is_running = False
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Memory monitor stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.check_now()
            except Exception as exc:
                self.diagnostics.record(exc, severity=ErrorSeverity.HIGH, details="memory check failed")
            await asyncio.sleep(self.interval_seconds)

    # ========================================
    # Reporting
    # ========================================

    def events(self, limit: int | None = None) -> list[str]:
        """Event log, oldest first."""
        entries = list(self._events)
        return entries if limit is None else entries[-limit:]

    def recommendations(self) -> list[str]:
        snapshot = self.sample()
        recommendations: list[str] = []

        if snapshot.total_kb > self.high_threshold_kb * 1.5:
            recommendations.append("Consider clearing unused question categories")
        if snapshot.total_kb >= self.high_threshold_kb:
            recommendations.append("Enable aggressive memory management")
        for name, usage in snapshot.per_cache_kb.items():
            if usage >= self.medium_threshold_kb:
                recommendations.append(f"The '{name}' cache is consuming significant memory")

        if not recommendations:
            recommendations.append("Memory usage is optimal")
        return recommendations

    @property
    def is_healthy(self) -> bool:
        return self._status.last_level != PressureLevel.HIGH

    def _log_event(self, message: str) -> None:
        self._events.append(f"[{datetime.now().isoformat()}] {message}")
        logger.info("Memory: {}", message)
