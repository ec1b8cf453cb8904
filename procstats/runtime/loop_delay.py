import asyncio
import logging
import math
import time
from collections import deque
from typing import Deque, Dict, Optional

log = logging.getLogger(__name__)

DEFAULT_RESOLUTION_MS = 10
MAX_SAMPLES = 10_000


class LoopDelayMonitor:
    """Event-loop delay histogram.

    Once enabled, a task on the running loop sleeps for ``resolution_ms``
    and records how late it woke up. Samples are kept in milliseconds.
    """

    def __init__(self, resolution_ms: int = DEFAULT_RESOLUTION_MS, max_samples: int = MAX_SAMPLES):
        if resolution_ms <= 0:
            raise ValueError("resolution_ms must be positive")
        self.resolution_ms = resolution_ms
        self._samples: Deque[float] = deque(maxlen=max_samples)
        self._task: Optional[asyncio.Task] = None
        self._enabled = False
        self._closed = False

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def closed(self) -> bool:
        return self._closed

    def enable(self) -> bool:
        """Start sampling on the running loop. Returns False if already enabled or closed."""
        if self._enabled or self._closed:
            return False
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._sample(), name="procstats-loop-delay")
        self._enabled = True
        log.info("Event-loop delay monitor enabled (resolution=%sms)", self.resolution_ms)
        return True

    def disable(self) -> bool:
        """Stop sampling and release the task. Only the first call has an effect."""
        if self._closed:
            return False
        self._closed = True
        self._enabled = False
        if self._task is not None:
            self._task.cancel()
        log.info("Event-loop delay monitor disabled after %d samples", len(self._samples))
        return True

    async def wait_closed(self) -> None:
        """Wait for the cancelled sampling task to finish."""
        if not self._closed:
            return
        task, self._task = self._task, None
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)

    async def _sample(self) -> None:
        interval = self.resolution_ms / 1000.0
        while True:
            start = time.perf_counter()
            await asyncio.sleep(interval)
            lag = (time.perf_counter() - start - interval) * 1000.0
            self._samples.append(max(lag, 0.0))

    def record(self, delay_ms: float) -> None:
        self._samples.append(max(float(delay_ms), 0.0))

    def percentile(self, pct: float) -> float:
        if not self._samples:
            return 0.0
        ordered = sorted(self._samples)
        idx = min(len(ordered) - 1, max(0, math.ceil(pct / 100.0 * len(ordered)) - 1))
        return ordered[idx]

    def snapshot(self) -> Dict[str, float]:
        count = len(self._samples)
        if not count:
            return {"count": 0, "min": 0.0, "max": 0.0, "mean": 0.0, "stddev": 0.0, "p50": 0.0, "p90": 0.0, "p99": 0.0}
        samples = list(self._samples)
        mean = sum(samples) / count
        variance = sum((s - mean) ** 2 for s in samples) / count
        return {
            "count": count,
            "min": min(samples),
            "max": max(samples),
            "mean": mean,
            "stddev": math.sqrt(variance),
            "p50": self.percentile(50),
            "p90": self.percentile(90),
            "p99": self.percentile(99),
        }
