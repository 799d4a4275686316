"""
Launch the Content Studio API with explicit uvicorn options.

Point a process manager or the frontend dev setup at this script instead of
typing the uvicorn arguments directly. Defaults come from CS_HOST, CS_PORT and
CS_LOG_LEVEL.
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path

import uvicorn


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the Content Studio API via uvicorn.")
    parser.add_argument("--host", default=os.environ.get("CS_HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("CS_PORT", 3001)))
    parser.add_argument(
        "--log-level",
        default=os.environ.get("CS_LOG_LEVEL", "info").lower(),
        choices=["critical", "error", "warning", "info", "debug", "trace"],
    )
    parser.add_argument(
        "--reload",
        dest="reload",
        action="store_true",
        help="Restart on source changes (development only).",
    )
    parser.add_argument("--no-reload", dest="reload", action="store_false", help="Disable reload (default).")
    parser.set_defaults(reload=False)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    os.chdir(Path(__file__).resolve().parents[1])

    uvicorn.run(
        "content_studio.main:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
