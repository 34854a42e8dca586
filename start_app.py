# start_app.py
"""Launch the order intake API server."""

from __future__ import annotations

import argparse
import os

import uvicorn
from dotenv import load_dotenv

import config


def main(argv: list[str] | None = None) -> None:
    """Load settings, optionally create tables on startup, then start the API."""

    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables from the models on startup",
    )
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    args = parser.parse_args(argv)

    load_dotenv()  # load environment variables from a .env file

    if args.create_tables:
        os.environ["DB_CREATE_ALL"] = "1"

    config.get_settings.cache_clear()
    settings = config.get_settings()  # ensure settings are initialized with any override

    uvicorn.run(
        "orderflow.app.main:app",
        host="0.0.0.0",  # nosec B104: bind for local development
        port=args.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
