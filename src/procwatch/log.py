# src/procwatch/log.py
"""Logging setup: plain text or structured JSON on stderr."""

import logging
import os
import sys
from logging.config import dictConfig
from typing import Optional

from .config import LoggingConfig
from .errors import ConfigError

LOG_LEVEL_ENV = "PROCWATCH_LOG"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def resolve_level(config: LoggingConfig, environ: Optional[dict] = None) -> str:
    """The PROCWATCH_LOG environment variable wins over the configured level."""
    env = os.environ if environ is None else environ
    level = (env.get(LOG_LEVEL_ENV) or config.level).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown log level '{level}'.")
    return level


def setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger for the application."""
    log_level = resolve_level(config)

    if config.json_format:
        dictConfig({
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': 'pythonjsonlogger.json.JsonFormatter',
                    'format': '%(asctime)s %(name)s %(levelname)s %(message)s',
                },
            },
            'handlers': {
                'json': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stderr',
                },
            },
            'root': {
                'handlers': ['json'],
                'level': log_level,
            },
        })
    else:
        logging.basicConfig(
            level=log_level,
            format=TEXT_FORMAT,
            stream=sys.stderr,
            force=True,
        )
