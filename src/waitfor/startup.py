"""Command line entrypoint: wait for dependencies before starting a process."""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

from pydantic import ValidationError

from waitfor.checks import database_ready, http_ready, redis_ready, service_listening
from waitfor.config import get_settings
from waitfor.errors import DependenciesNotReady
from waitfor.logging import configure_logging, logger
from waitfor.runner import Dependencies, RetryPolicy


def named(value: str) -> tuple[str, str]:
    name, sep, target = value.partition("=")
    if not sep or not name or not target:
        raise argparse.ArgumentTypeError(f"expected NAME=TARGET, got {value!r}")
    return name, target


def build_dependencies(args: argparse.Namespace, connect_timeout: float) -> Dependencies:
    dependencies = Dependencies()
    for name, address in args.tcp:
        dependencies.add(name, service_listening(address, connect_timeout))
    for name, url in args.db:
        driver, sep, datasource = url.partition("://")
        if not sep:
            raise ValueError(f"Database URL for {name!r} must look like DRIVER://DATASOURCE")
        dependencies.add(name, database_ready(driver, datasource))
    for name, url in args.redis:
        dependencies.add(name, redis_ready(url, connect_timeout))
    for name, url in args.http:
        dependencies.add(name, http_ready(url, connect_timeout))
    return dependencies


async def main(args: argparse.Namespace) -> int:
    try:
        settings = get_settings()
        configure_logging(settings.log_level, json_logs=settings.log_json)
        policy = RetryPolicy(
            retries=args.retries if args.retries is not None else settings.retries,
            interval=args.interval if args.interval is not None else settings.interval,
        )
        connect_timeout = args.connect_timeout if args.connect_timeout is not None else settings.connect_timeout
        dependencies = build_dependencies(args, connect_timeout)
    except (ValidationError, ValueError) as exc:
        logger.error("Invalid configuration: {error}", error=str(exc))
        return 2

    if not len(dependencies):
        logger.warning("No dependencies to wait for")
        return 0

    logger.info(
        "Waiting for dependencies",
        dependencies=dependencies.names(),
        retries=policy.retries,
        interval=policy.interval,
    )
    try:
        await dependencies.wait_async(policy)
    except DependenciesNotReady as exc:
        logger.error("Dependencies not ready: {names}", names=", ".join(exc.names))
        return 1
    logger.info("All dependencies are ready")
    return 0


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Wait until dependencies are ready")
    parser.add_argument("--tcp", type=named, action="append", default=[], metavar="NAME=HOST:PORT",
                        help="Wait for a TCP listener")
    parser.add_argument("--db", type=named, action="append", default=[], metavar="NAME=DRIVER://DATASOURCE",
                        help="Wait for a database (SQLAlchemy URL)")
    parser.add_argument("--redis", type=named, action="append", default=[], metavar="NAME=URL",
                        help="Wait for a Redis server")
    parser.add_argument("--http", type=named, action="append", default=[], metavar="NAME=URL",
                        help="Wait for an HTTP endpoint")
    parser.add_argument("--retries", type=int, default=None, help="Attempts per dependency (WAITFOR_RETRIES)")
    parser.add_argument("--interval", type=float, default=None,
                        help="Seconds between attempts (WAITFOR_INTERVAL)")
    parser.add_argument("--connect-timeout", type=float, default=None,
                        help="Per-attempt connect timeout in seconds (WAITFOR_CONNECT_TIMEOUT)")
    return parser.parse_args(argv)


def entrypoint() -> None:
    args = parse_args()
    raise SystemExit(asyncio.run(main(args)))


if __name__ == "__main__":  # pragma: no cover
    entrypoint()
