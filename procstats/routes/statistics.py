from fastapi import APIRouter

from ..config import STATS_ROUTE
from ..schemas import MetricsResponse, StatsResponse, UptimeResponse

TAGS = ["statistics"]


def build_router(reporter) -> APIRouter:
    router = APIRouter(tags=TAGS)
    opts = reporter.options

    @router.get(opts.uptime_route, response_model=UptimeResponse, summary="Returns process uptime")
    def uptime():
        return reporter.uptime()

    @router.get(opts.metrics_route, response_model=MetricsResponse, summary="Returns memory usage metrics")
    def metrics():
        return reporter.metrics()

    @router.get(STATS_ROUTE, response_model=StatsResponse, summary="Returns all system statistics")
    def stats():
        return reporter.stats()

    return router
