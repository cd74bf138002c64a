"""CLI for the txtweb server."""
from __future__ import annotations

import argparse
import asyncio

from .config import LOG_LEVELS, Config
from .server import configure_logging, serve


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        argparse.Namespace: Parsed CLI options:
            - config (str | None): Path to YAML config file.
            - host (str | None): Bind address.
            - port (int | None): HTTP port.
            - log_level (str | None): Logging level.
    """
    parser = argparse.ArgumentParser(
        description="Serve websites from DNS TXT records",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", default=None, help="Path to YAML config")
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="HTTP port (overrides config)")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help="Log level (overrides config)",
    )
    return parser.parse_args(argv)


def load_config(args: argparse.Namespace) -> Config:
    """Build the configuration from the file and command-line overrides."""
    config = Config(args.config)
    if args.host is not None:
        config.host = args.host
    if args.port is not None:
        config.port = args.port
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def main() -> None:
    """Run the CLI entry point.

    Returns:
        None
    """
    args = parse_args()
    configure_logging(args.log_level or "INFO")
    config = load_config(args)
    try:
        asyncio.run(serve(config))
    except (KeyboardInterrupt, SystemExit):
        pass
