"""Readiness checks for common kinds of dependency."""

from __future__ import annotations

import socket

import httpx
from redis import Redis
from sqlalchemy import create_engine, text

from waitfor.runner import Check


def _split_address(address: str) -> tuple[str, int]:
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"Address must be in host:port form, got {address!r}")
    # ":8443" means the local machine
    return host.strip("[]") or "localhost", int(port)


def service_listening(address: str, timeout: float) -> Check:
    """Check that something accepts TCP connections on ``address``.

    ``address`` is ``host:port``, e.g. ``192.168.0.1:1234``, ``[::1]:8080`` or
    ``:8080`` for the local machine. A malformed address raises ``ValueError``
    here rather than on every attempt. The connection is closed as soon as it opens.
    """
    host, port = _split_address(address)

    def check() -> None:
        with socket.create_connection((host, port), timeout=timeout):
            pass

    return check


def database_ready(driver: str, datasource: str) -> Check:
    """Check that a database accepts connections and answers ``SELECT 1``.

    ``driver`` is a SQLAlchemy dialect (``postgresql+psycopg``, ``mysql+pymysql``,
    ``sqlite``) and ``datasource`` the rest of the URL after ``://``, e.g.
    ``database_ready("postgresql+psycopg", "postgres:secret@localhost:5432/postgres")``.
    """
    url = f"{driver}://{datasource}"

    def check() -> None:
        engine = create_engine(url)
        try:
            with engine.connect() as connection:
                connection.execute(text("SELECT 1")).fetchone()
        finally:
            engine.dispose()

    return check


def redis_ready(url: str, timeout: float = 5.0) -> Check:
    def check() -> None:
        client = Redis.from_url(url, socket_connect_timeout=timeout, socket_timeout=timeout)
        try:
            if not client.ping():
                raise ConnectionError(f"Unexpected PING response from {url}")
        finally:
            client.close()

    return check


def http_ready(url: str, timeout: float = 5.0) -> Check:
    """Check that ``url`` answers a GET with a successful status (redirects followed)."""

    def check() -> None:
        with httpx.Client(timeout=timeout, follow_redirects=True) as client:
            client.get(url).raise_for_status()

    return check


__all__ = ["service_listening", "database_ready", "redis_ready", "http_ready"]
