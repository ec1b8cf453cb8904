import logging
import math
import os
import time
from dataclasses import dataclass
from typing import Optional

import psutil

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemoryUsage:
    rss: int
    heap_total: int
    heap_used: int
    external: int


@dataclass(frozen=True)
class CpuSample:
    active: float  # user + system CPU seconds
    wall: float  # monotonic seconds


class ProcessProbe:
    """Reads uptime, memory and CPU time for one process through psutil."""

    def __init__(self, pid: Optional[int] = None):
        self.process = psutil.Process(pid or os.getpid())

    def uptime(self) -> int:
        elapsed = time.time() - self.process.create_time()
        return max(0, math.floor(elapsed))

    def memory_usage(self) -> MemoryUsage:
        mem = self.process.memory_info()
        try:
            heap_used = self.process.memory_full_info().uss
        except (psutil.AccessDenied, AttributeError, NotImplementedError):
            heap_used = mem.rss
        shared = getattr(mem, "shared", None)
        if shared is None:
            # No shared field on macOS and Windows: resident pages not unique to us
            shared = max(mem.rss - heap_used, 0)
        return MemoryUsage(
            rss=mem.rss,
            heap_total=mem.vms,
            heap_used=heap_used,
            external=shared,
        )

    def cpu_sample(self) -> CpuSample:
        cpu = self.process.cpu_times()
        return CpuSample(active=cpu.user + cpu.system, wall=time.monotonic())
