from __future__ import annotations

import pytest
from pydantic import ValidationError

from waitfor.config import Settings, get_settings
from waitfor.runner import RetryPolicy


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for name in ("LOG_LEVEL", "LOG_JSON", "WAITFOR_RETRIES", "WAITFOR_INTERVAL", "WAITFOR_CONNECT_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_settings_defaults():
    settings = Settings()
    assert settings.log_level == "INFO"
    assert settings.log_json is False
    assert settings.retry_policy == RetryPolicy()
    assert settings.connect_timeout == 5.0


def test_settings_load_from_env(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_JSON", "true")
    monkeypatch.setenv("WAITFOR_RETRIES", "3")
    monkeypatch.setenv("WAITFOR_INTERVAL", "0.5")
    monkeypatch.setenv("WAITFOR_CONNECT_TIMEOUT", "2")

    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.log_json is True
    assert settings.retry_policy == RetryPolicy(retries=3, interval=0.5)
    assert settings.connect_timeout == 2.0
    assert get_settings() is settings


def test_settings_load_from_env_file(tmp_path):
    (tmp_path / ".env").write_text("WAITFOR_RETRIES=4\nWAITFOR_INTERVAL=1\n", encoding="utf-8")

    settings = Settings()
    assert settings.retry_policy == RetryPolicy(retries=4, interval=1)


def test_settings_reject_zero_retries(monkeypatch):
    monkeypatch.setenv("WAITFOR_RETRIES", "0")

    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.parametrize("value", ["inf", "nan"])
def test_settings_reject_unbounded_interval(monkeypatch, value):
    monkeypatch.setenv("WAITFOR_INTERVAL", value)

    with pytest.raises(ValidationError):
        Settings()
