"""
reloadserve - Main Application Entry Point

Serves a directory over HTTP and reloads connected browser tabs whenever
a file under it changes.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog

from reloadserve import __version__
from reloadserve.config import get_settings
from reloadserve.server import serve


def setup_logging(level: Optional[str] = None):
    """Configure structured logging."""
    settings = get_settings()

    # Set log level
    level = level or settings.log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Configure structlog
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer() if sys.stderr.isatty() else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        stream=sys.stdout
    )

    # Reduce noise from libraries
    logging.getLogger("watchdog").setLevel(logging.WARNING)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="reloadserve",
        description="Serve files over HTTP and live reload the browser on changes",
    )
    parser.add_argument(
        "path", nargs="?", type=Path, default=Path("."),
        help="directory or single file to serve (default: current directory)",
    )
    parser.add_argument(
        "-a", "--address", default=None,
        help="address to serve on (default: 127.0.0.1:1111)",
    )
    parser.add_argument("--log-level", default=None, help="debug, info, warning or error")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level)
    logger = structlog.get_logger()

    logger.info("Starting reloadserve...", path=str(args.path))
    try:
        serve(args.path, args.address)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 0
    except (OSError, ValueError) as e:
        logger.error("Failed to start server", error=str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
