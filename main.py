#!/usr/bin/env python3
"""
TaskReview -- users submit assignments, admins accept or reject them.

Usage:
  python main.py
  python main.py --port 8080
  python main.py --host 0.0.0.0 --reload

Environment variables (see core/config.py):
  SECRET_KEY    Token signing key, at least 32 characters. Required unless DEBUG=true.
  DEBUG         true to auto-generate a throwaway SECRET_KEY for local work.
  DATABASE_URL  SQLAlchemy URL. Defaults to a SQLite file beside the project.
  HOST, PORT    Listen address. Defaults to 127.0.0.1:5000.
"""

import argparse

import uvicorn

from core.config import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskreview",
        description="Run the TaskReview API server.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --port 8080
  DEBUG=true python main.py --reload
        """,
    )
    parser.add_argument(
        "--host",
        default=None,
        help="Interface to bind (default: HOST setting, 127.0.0.1)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: PORT setting, 5000)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart the server when source files change (development only)",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()
    # Fail fast on a bad SECRET_KEY before uvicorn starts its workers.
    settings = get_settings()
    uvicorn.run(
        "asgi:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
