"""Command-line interface for the user directory service."""

from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from users_api.config import Settings, load_settings

logger = logging.getLogger("users_api.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="User directory API utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the HTTP API (default: 8000)",
    )
    serve_parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file (default: $USERS_API_CONFIG)",
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _serve(*, settings: Settings, host: str, port: int) -> None:
    from users_api.api import create_app
    import uvicorn

    logger.info("Starting user directory API on http://%s:%s", host, port)
    if settings.is_development:
        logger.info("API documentation is available at /docs")

    app = create_app(settings=settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    config_path = Path(args.config).expanduser() if getattr(args, "config", None) else None
    settings = load_settings(config_path)

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    if args.command == "serve":
        _serve(settings=settings, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
