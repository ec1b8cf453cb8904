import logging
from dataclasses import dataclass
from threading import Lock
from typing import Optional

import psutil

from ..utils.formatting import format_percentage, sanitize_fraction
from .probe import CpuSample, ProcessProbe

log = logging.getLogger(__name__)

BUSY_THRESHOLD = 0.5


@dataclass(frozen=True)
class Utilization:
    raw: float
    percentage: str

    @classmethod
    def from_fraction(cls, value) -> "Utilization":
        raw = sanitize_fraction(value)
        return cls(raw=raw, percentage=format_percentage(raw))

    def as_dict(self) -> dict:
        return {"raw": self.raw, "percentage": self.percentage}


class UtilizationTracker:
    """Utilization measured against a baseline fixed at construction.

    Readings are cumulative since the baseline: the share of wall time not
    spent idle. Each reading folds the interval since the previous one
    into the idle total. An interval in which the process kept a CPU busy
    for at least ``busy_threshold`` of its wall time counts as fully active;
    otherwise the part of it not spent on CPU counts as idle.
    """

    def __init__(self, probe: ProcessProbe, baseline: CpuSample, busy_threshold: float = BUSY_THRESHOLD):
        self._probe = probe
        self.baseline = baseline
        self.busy_threshold = busy_threshold
        self._last = baseline
        self._idle = 0.0
        self._lock = Lock()

    @classmethod
    def capture(cls, probe: ProcessProbe) -> Optional["UtilizationTracker"]:
        try:
            baseline = probe.cpu_sample()
        except (psutil.Error, NotImplementedError, AttributeError, OSError) as e:
            log.warning("Event-loop utilization unavailable on this platform: %s", e)
            return None
        return cls(probe, baseline)

    def current(self) -> Utilization:
        with self._lock:
            now = self._probe.cpu_sample()
            wall = now.wall - self._last.wall
            if wall > 0:
                cpu = max(now.active - self._last.active, 0.0)
                if cpu < self.busy_threshold * wall:
                    self._idle += wall - cpu
                self._last = now
            elapsed = self._last.wall - self.baseline.wall
            if elapsed <= 0:
                return Utilization.from_fraction(0.0)
            return Utilization.from_fraction(1.0 - self._idle / elapsed)
