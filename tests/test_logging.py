from __future__ import annotations

import json
import logging
import sys

import pytest
from loguru import logger

import waitfor.logging as waitfor_logging
from waitfor.logging import QUIET_LOGGERS, InterceptHandler, configure_logging


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(waitfor_logging, "_LOGGING_CONFIGURED", False)
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    logger.remove()
    logger.add(sys.stderr)
    root.handlers[:] = handlers
    root.setLevel(level)
    for name, previous in quiet_levels.items():
        logging.getLogger(name).setLevel(previous)


def test_stdlib_records_are_forwarded_with_source(fresh_logging):
    configure_logging("debug")
    records: list[dict] = []
    logger.add(lambda message: records.append(message.record), level="DEBUG")

    logging.getLogger("sqlalchemy.pool").warning("pool exhausted")

    assert any(isinstance(handler, InterceptHandler) for handler in logging.getLogger().handlers)
    assert [record["message"] for record in records] == ["pool exhausted"]
    assert records[0]["extra"]["source"] == "sqlalchemy.pool"


def test_http_client_request_lines_are_dropped(fresh_logging):
    configure_logging("DEBUG")
    messages: list[str] = []
    logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")

    logging.getLogger("httpx").info("HTTP Request: GET http://localhost/healthz")
    logging.getLogger("httpx").warning("retrying")

    assert messages == ["retrying"]


def test_json_output(fresh_logging, capsys):
    configure_logging("INFO", json_logs=True)

    logger.info("Waiting for {dependency}", dependency="db")

    line = capsys.readouterr().err.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["record"]["message"] == "Waiting for db"
    assert payload["record"]["extra"]["dependency"] == "db"


def test_configure_logging_is_idempotent(fresh_logging):
    configure_logging()
    handlers = list(logging.getLogger().handlers)

    configure_logging("DEBUG", json_logs=True)

    assert logging.getLogger().handlers == handlers
