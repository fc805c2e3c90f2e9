#!/usr/bin/env python3
"""
UserHub -- In-memory user registry with bearer-token sessions.

Usage:
  python main.py
  python main.py --port 9000
  python main.py --host 0.0.0.0 --port 8080
  python main.py --reload --log-level debug

Environment variables (see core/config.py):
  HOST, PORT     Default bind address when --host/--port are not given.
  LOG_LEVEL      Logging level for the application loggers (default INFO).
  SEED_USERS     Load the built-in seed users at startup (default true).
"""

import argparse

import uvicorn

from core.config import get_settings


def main() -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(
        prog="userhub",
        description="Serve the UserHub API with uvicorn.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --port 9000
  LOG_LEVEL=DEBUG python main.py --reload
        """,
    )
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on (default: {settings.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    parser.add_argument(
        "--log-level",
        choices=["critical", "error", "warning", "info", "debug"],
        default=settings.log_level.lower(),
        metavar="LEVEL",
        help="uvicorn log level: critical, error, warning, info, or debug",
    )
    args = parser.parse_args()

    # Users and sessions live in process memory -- each restart (including
    # --reload restarts) starts again from the seed data.
    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
