"""Run the SafeDrive backend.

Usage
-----
::

    python -m safedrive --port 5000 --data-dir ./data

Every option falls back to the matching ``SAFEDRIVE_*`` environment
variable (see :class:`safedrive.config.ServerConfig`).
"""

from __future__ import annotations

import argparse
import logging
from typing import Any

from aiohttp import web

from safedrive.config import ServerConfig
from safedrive.web import create_app


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="safedrive", description="SafeDrive backend server")
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="TCP port")
    parser.add_argument("--data-dir", help="Directory for the JSON documents")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    overrides: dict[str, Any] = {}
    if args.host:
        overrides["host"] = args.host
    if args.port:
        overrides["port"] = args.port
    if args.data_dir:
        overrides["data_dir"] = args.data_dir
    if args.log_level:
        overrides["log_level"] = args.log_level

    config = ServerConfig.from_env(**overrides)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)


if __name__ == "__main__":
    main()
