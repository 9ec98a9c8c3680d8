# tests/unit/test_log.py: Unit tests for logging setup.

import logging

import pytest

from procwatch.config import LoggingConfig
from procwatch.errors import ConfigError
from procwatch.log import LOG_LEVEL_ENV, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_resolve_level_defaults_to_config():
    assert resolve_level(LoggingConfig(), environ={}) == "INFO"


def test_resolve_level_env_overrides_config():
    assert resolve_level(LoggingConfig(level="INFO"), environ={LOG_LEVEL_ENV: "debug"}) == "DEBUG"


def test_resolve_level_rejects_unknown():
    with pytest.raises(ConfigError, match="Unknown log level"):
        resolve_level(LoggingConfig(level="chatty"), environ={})


def test_setup_text_logging(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "warning")
    setup_logging(LoggingConfig())
    assert logging.getLogger().level == logging.WARNING


def test_setup_json_logging(monkeypatch, capsys):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    setup_logging(LoggingConfig(json_format=True))

    logging.getLogger("procwatch.test").info("hello")

    err = capsys.readouterr().err
    assert '"message": "hello"' in err
    assert '"levelname": "INFO"' in err
