import logging
import os
from logging.handlers import RotatingFileHandler
from .config import settings

_HANDLER_TAG = "_procstats_handler"


def configure_logging(level: str | None = None, logs_dir: str | None = None) -> None:
    root = logging.getLogger()
    # Already configured in this process (reloads, test apps)
    if any(getattr(h, _HANDLER_TAG, False) for h in root.handlers):
        return

    logs_dir = logs_dir or settings.logs_dir
    os.makedirs(logs_dir, exist_ok=True)
    log_path = os.path.join(logs_dir, "app.log")

    lvl = logging.getLevelName((level or settings.log_level).upper())
    if not isinstance(lvl, int):
        lvl = logging.INFO
    root.setLevel(lvl)

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console handler
    ch = logging.StreamHandler()
    ch.setLevel(lvl)
    ch.setFormatter(formatter)
    setattr(ch, _HANDLER_TAG, True)
    root.addHandler(ch)

    # Rotating file handler
    fh = RotatingFileHandler(log_path, maxBytes=2_000_000, backupCount=5)
    fh.setLevel(lvl)
    fh.setFormatter(formatter)
    setattr(fh, _HANDLER_TAG, True)
    root.addHandler(fh)
