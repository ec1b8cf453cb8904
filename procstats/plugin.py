import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import StatisticsOptions
from .reporter import StatisticsReporter

log = logging.getLogger(__name__)


def register_statistics(app: FastAPI, **options) -> StatisticsReporter:
    """Attach the uptime, metrics and stats routes to ``app``.

    Options: ``metricsInMB``/``metrics_in_mb`` (default False),
    ``uptimeRoute``/``uptime_route`` (default ``/uptime``) and
    ``metricsRoute``/``metrics_route`` (default ``/metrics``). The combined
    route is always ``/stats``.

    The delay histogram is enabled when the app's lifespan starts and
    disabled when it ends.
    """
    opts = StatisticsOptions.from_mapping(options)
    reporter = StatisticsReporter(opts)
    app.include_router(reporter.router())
    app.state.statistics = reporter
    _wrap_lifespan(app, reporter)

    log.info(
        "Statistics routes registered: %s %s %s (memory in %s)",
        opts.uptime_route,
        opts.metrics_route,
        opts.stats_route,
        "MB" if opts.metrics_in_mb else "bytes",
    )
    return reporter


def _wrap_lifespan(app: FastAPI, reporter: StatisticsReporter) -> None:
    inner = app.router.lifespan_context

    @asynccontextmanager
    async def lifespan(app_):
        reporter.start()
        try:
            async with inner(app_) as state:
                yield state
        finally:
            await reporter.close()

    app.router.lifespan_context = lifespan
