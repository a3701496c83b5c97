import logging

import pytest

from erd_sdk.config import SDKConfig
from erd_sdk.log import configure_logging
from erd_sdk.version import user_agent


def test_defaults(monkeypatch):
    for name in ("ERD_PROXY_URL", "ERD_TIMEOUT", "ERD_POLL_INTERVAL", "ERD_NUM_SHARDS", "ERD_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    cfg = SDKConfig.from_env()
    assert cfg.proxy_url == "http://localhost:7950"
    assert cfg.request_timeout == 10.0
    assert cfg.poll_interval == 5.0
    assert cfg.num_shards == 3
    assert cfg.hrp == "erd"
    assert cfg.user_agent == user_agent()


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("ERD_PROXY_URL", "https://gateway.example")
    monkeypatch.setenv("ERD_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("ERD_LOG_LEVEL", "debug")
    cfg = SDKConfig.from_env()
    assert cfg.proxy_url == "https://gateway.example"
    assert cfg.poll_interval == 0.5
    assert cfg.log_level == "DEBUG"


def test_with_overrides_ignores_unknown_and_none():
    base = SDKConfig(proxy_url="http://a.test")
    cfg = SDKConfig.with_overrides(base, proxy_url=None, num_shards=2, bogus=1)
    assert cfg.proxy_url == "http://a.test"
    assert cfg.num_shards == 2
    assert base.num_shards == 3


@pytest.mark.parametrize(
    "kwargs",
    [
        {"proxy_url": "ftp://x"},
        {"request_timeout": 0},
        {"poll_interval": -1},
        {"num_shards": 0},
        {"log_level": "LOUD"},
    ],
)
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SDKConfig(**kwargs)


def test_headers():
    headers = SDKConfig(user_agent="x/1").http_headers()
    assert headers["User-Agent"] == "x/1"
    assert headers["Accept"] == "application/json"


def test_configure_logging_sets_package_level():
    log = configure_logging("warning")
    assert log.name == "erd_sdk"
    assert log.level == logging.WARNING
