# This project was developed with assistance from AI tools.
"""
Run with:
    python -m smart_router [--host HOST] [--port PORT]
"""

import argparse
import logging
import sys

import uvicorn

from . import __version__
from .core.config import settings


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smart-router",
        description="OpenAI-compatible smart router for chat completions.",
    )
    parser.add_argument("-v", "--version", action="version", version=__version__)
    parser.add_argument("--host", default=settings.HOST, help="bind address")
    parser.add_argument("--port", type=int, default=settings.PORT, help="bind port")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="root log level")
    parser.add_argument("--reload", action="store_true", help="reload on code changes")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger("smart_router")
    logger.info("Starting smart router on %s:%s", args.host, args.port)
    logger.info("OpenAI-compatible endpoint available at /v1/chat/completions")

    uvicorn.run(
        "smart_router.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_config=None,
    )


if __name__ == "__main__":
    main()
