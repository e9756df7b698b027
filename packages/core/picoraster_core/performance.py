"""Frame timing against the animation cadence, with process resource sampling."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass

import psutil

logger = logging.getLogger("picoraster.performance")


@dataclass(frozen=True)
class PerformanceTargets:
    interval_ms: int = 33
    cpu_percent_max: float = 90.0
    rss_mb_max: float = 1024.0
    frame_budget_factor: float = 1.0

    @property
    def frame_budget_s(self) -> float:
        return self.interval_ms * self.frame_budget_factor / 1000.0


@dataclass(frozen=True)
class BudgetStatus:
    frames: int
    last_frame_s: float
    avg_frame_s: float
    fps: float
    cpu_percent: float
    rss_mb: float
    over_budget: bool
    warning: str | None


class PerformanceMonitor:
    """Collects frame durations reported by the scheduler.

    Frames slower than the cadence are not dropped; ticks simply arrive late.
    ``record`` logs the first frame of each over-budget streak.
    """

    def __init__(self, targets: PerformanceTargets | None = None, window: int = 30) -> None:
        self.targets = targets or PerformanceTargets()
        self.frames = 0
        self._durations: deque[float] = deque(maxlen=max(1, window))
        self._over_budget = False
        self._process = psutil.Process()
        # Prime non-blocking CPU measurement.
        self._process.cpu_percent(interval=None)

    def reset(self) -> None:
        self.frames = 0
        self._durations.clear()
        self._over_budget = False

    def record(self, elapsed_s: float) -> None:
        self.frames += 1
        self._durations.append(elapsed_s)
        over = elapsed_s > self.targets.frame_budget_s
        if over and not self._over_budget:
            logger.warning(
                f"frame took {elapsed_s * 1000:.1f} ms, cadence is {self.targets.interval_ms} ms",
                extra={"event": "frame_over_budget"},
            )
        self._over_budget = over

    def sample(self) -> BudgetStatus:
        cpu = float(self._process.cpu_percent(interval=None))
        rss_mb = float(self._process.memory_info().rss) / (1024 * 1024)

        last = self._durations[-1] if self._durations else 0.0
        avg = sum(self._durations) / len(self._durations) if self._durations else 0.0
        # Ticks never overlap, so the achievable rate is bounded by both.
        period = max(avg, self.targets.interval_ms / 1000.0)
        fps = 1.0 / period if self._durations else 0.0

        warning = None
        if cpu > self.targets.cpu_percent_max or rss_mb > self.targets.rss_mb_max:
            warning = "resource_overload"
        elif avg > self.targets.frame_budget_s:
            warning = "below_cadence"

        return BudgetStatus(
            frames=self.frames,
            last_frame_s=last,
            avg_frame_s=avg,
            fps=fps,
            cpu_percent=cpu,
            rss_mb=rss_mb,
            over_budget=avg > self.targets.frame_budget_s,
            warning=warning,
        )
