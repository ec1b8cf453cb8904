import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional

log = logging.getLogger(__name__)

STATS_ROUTE = "/stats"
TRUTHY = {"1", "true", "yes", "y", "on"}


def _get_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in TRUTHY


@dataclass
class Settings:
    # Statistics plugin
    metrics_in_mb: bool = _get_bool("STATS_METRICS_IN_MB", "false")
    uptime_route: str = os.getenv("STATS_UPTIME_ROUTE", "/uptime")
    metrics_route: str = os.getenv("STATS_METRICS_ROUTE", "/metrics")

    # Server
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "3000"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    logs_dir: str = os.getenv("LOGS_DIR", "logs")

    def statistics_options(self) -> Dict[str, Any]:
        return {
            "metrics_in_mb": self.metrics_in_mb,
            "uptime_route": self.uptime_route,
            "metrics_route": self.metrics_route,
        }


settings = Settings()


class StatisticsConfigError(ValueError):
    """Raised when the options passed at registration cannot be used."""


# Option names accepted at registration, mapped to StatisticsOptions fields
OPTION_ALIASES = {
    "metricsInMB": ("metrics_in_mb", bool),
    "uptimeRoute": ("uptime_route", str),
    "metricsRoute": ("metrics_route", str),
    "metrics_in_mb": ("metrics_in_mb", bool),
    "uptime_route": ("uptime_route", str),
    "metrics_route": ("metrics_route", str),
}


def _coerce_value(value: Any, typ) -> object:
    if typ is bool:
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUTHY
    if typ is str:
        if not isinstance(value, str):
            raise StatisticsConfigError(f"Expected a string, got {type(value).__name__}")
        return value.strip()
    return value


@dataclass(frozen=True)
class StatisticsOptions:
    metrics_in_mb: bool = False
    uptime_route: str = "/uptime"
    metrics_route: str = "/metrics"

    @property
    def stats_route(self) -> str:
        return STATS_ROUTE

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None) -> "StatisticsOptions":
        """Merge caller options over the defaults.

        Accepts both the camelCase names (``metricsInMB``) and the field
        names (``metrics_in_mb``). Unknown keys are ignored with a warning.
        """
        values: Dict[str, Any] = {f.name: f.default for f in fields(cls)}
        for key, raw in (data or {}).items():
            if key not in OPTION_ALIASES:
                log.warning("Ignoring unknown statistics option %r", key)
                continue
            attr, typ = OPTION_ALIASES[key]
            try:
                values[attr] = _coerce_value(raw, typ)
            except StatisticsConfigError as e:
                raise StatisticsConfigError(f"Invalid value for {key!r}: {e}") from e
        opts = cls(**values)
        opts.validate()
        return opts

    def validate(self) -> None:
        for name, route in (("uptime_route", self.uptime_route), ("metrics_route", self.metrics_route)):
            if not route.startswith("/"):
                raise StatisticsConfigError(f"{name} must start with '/': {route!r}")
            if route == STATS_ROUTE:
                raise StatisticsConfigError(f"{name} cannot reuse the fixed {STATS_ROUTE} route")
        if self.uptime_route == self.metrics_route:
            raise StatisticsConfigError(
                f"uptime_route and metrics_route must differ (both {self.uptime_route!r})"
            )
