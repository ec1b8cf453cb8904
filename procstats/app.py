import hashlib
import os

from fastapi import FastAPI
from dotenv import load_dotenv

# Load env early
load_dotenv()
from .config import settings
from .logging_config import configure_logging
from .plugin import register_statistics


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="procstats demo", version="0.1.0")

    register_statistics(app, **settings.statistics_options())

    # CPU-bound route for watching utilization move
    @app.get("/slow")
    def slow(rounds: int = 100, size_mb: int = 8):
        data = os.urandom(size_mb * 1024 * 1024)
        digest = ""
        for _ in range(rounds):
            digest = hashlib.sha256(data).hexdigest()
        return {"hash": digest}

    return app
