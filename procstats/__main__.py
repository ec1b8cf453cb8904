import argparse

import uvicorn

from .app import create_app
from .config import settings


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the procstats demo server")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    args = parser.parse_args()

    uvicorn.run(create_app(), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
