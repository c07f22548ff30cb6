"""
Command-line entry point.

Usage:
    taskapi
    taskapi --bind-addr http://127.0.0.1:9000/api
    taskapi -b https://0.0.0.0/api --log-level debug
"""

import argparse
import sys
from urllib.parse import urlparse

import uvicorn

from taskapi import __version__
from taskapi.config import settings
from taskapi.logging_config import get_logger, setup_logging
from taskapi.main import app

DEFAULT_PORTS = {"http": 80, "https": 443}
LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def parse_bind_addr(bind_addr: str) -> tuple[str, int]:
    """
    Extract (host, port) from a bind URL.

    Falls back to the scheme's default port. Raises ValueError if the URL has
    no host or no usable port.
    """
    parsed = urlparse(bind_addr)
    if not parsed.hostname:
        raise ValueError(f"no host in bind address: {bind_addr!r}")
    try:
        port = parsed.port
    except ValueError as e:
        raise ValueError(f"invalid port in bind address: {bind_addr!r}") from e
    if port is None:
        port = DEFAULT_PORTS.get(parsed.scheme)
    if port is None:
        raise ValueError(f"no port in bind address and no default for scheme {parsed.scheme!r}")
    return parsed.hostname, port


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taskapi",
        description="Serve signed challenge tasks over HTTP.",
    )
    parser.add_argument(
        "-b",
        "--bind-addr",
        default=settings.bind_addr,
        help=f"Address to bind to and serve from (default: {settings.bind_addr})",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=LOG_LEVELS,
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = get_logger("taskapi.cli")

    try:
        host, port = parse_bind_addr(args.bind_addr)
    except ValueError as e:
        logger.error("invalid_bind_addr", error=str(e))
        print(f"Cannot bind to requested address: {e}", file=sys.stderr)
        return 2

    logger.info("server_starting", host=host, port=port)
    uvicorn.run(app, host=host, port=port, log_level=args.log_level)
    return 0


if __name__ == "__main__":
    sys.exit(main())
