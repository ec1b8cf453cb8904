from typing import Any, Dict, Optional

from fastapi import APIRouter

from .config import StatisticsOptions
from .routes.statistics import build_router
from .runtime.loop_delay import DEFAULT_RESOLUTION_MS, LoopDelayMonitor
from .runtime.probe import ProcessProbe
from .runtime.utilization import UtilizationTracker
from .utils.formatting import format_memory_value, utc_timestamp


class StatisticsReporter:
    """Process statistics for one plugin registration.

    The baseline, the delay histogram and the options are set here and
    only read by request handlers afterwards.
    """

    def __init__(self, options: Optional[StatisticsOptions] = None, probe: Optional[ProcessProbe] = None):
        self.options = options or StatisticsOptions()
        self.probe = probe or ProcessProbe()
        self.utilization: Optional[UtilizationTracker] = UtilizationTracker.capture(self.probe)
        self.loop_delay = LoopDelayMonitor(resolution_ms=DEFAULT_RESOLUTION_MS)

    def uptime(self) -> Dict[str, Any]:
        return {"uptime": self.probe.uptime()}

    def metrics(self) -> Dict[str, Any]:
        usage = self.probe.memory_usage()
        in_mb = self.options.metrics_in_mb
        return {
            "memory": {
                "rss": format_memory_value(usage.rss, in_mb),
                "heapTotal": format_memory_value(usage.heap_total, in_mb),
                "heapUsed": format_memory_value(usage.heap_used, in_mb),
                "external": format_memory_value(usage.external, in_mb),
            },
            "elu": self.utilization.current().as_dict() if self.utilization else None,
            "timestamp": utc_timestamp(),
        }

    def stats(self) -> Dict[str, Any]:
        payload = self.uptime()
        payload.update(self.metrics())
        return payload

    def router(self) -> APIRouter:
        return build_router(self)

    def start(self) -> None:
        self.loop_delay.enable()

    async def close(self) -> None:
        if self.loop_delay.disable():
            await self.loop_delay.wait_closed()
